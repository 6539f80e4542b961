"""Fan one prompt out to several LLM backends and collect uniform results."""

__version__ = "0.1.0"
