"""Configuration management for promptfan"""

import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_PATH = Path.home() / ".promptfan" / "config.yaml"

# Section name -> vendor environment variable used when no key is configured
VENDOR_KEY_ENV = {
    "gemini": "GEMINI_API_KEY",
    "groq": "GROQ_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

SECTIONS = ("gemini", "groq", "anthropic", "ollama")


class ProviderSettings(BaseModel):
    """Per-provider configuration"""
    enabled: bool = True
    api_key: Optional[str] = None
    models: List[str] = Field(default_factory=list)  # empty -> adapter's built-in list
    model: Optional[str] = None  # default model; first advertised when unset
    temperature: float = Field(0.7, ge=0.0)
    max_tokens: int = Field(1024, ge=1)
    base_url: Optional[str] = None
    timeout: float = Field(60.0, gt=0)


class OllamaSettings(ProviderSettings):
    base_url: Optional[str] = "http://localhost:11434"
    timeout: float = Field(120.0, gt=0)
    num_ctx: Optional[int] = 8192


class Config(BaseSettings):
    """Main promptfan configuration"""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PROMPTFAN_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    gemini: ProviderSettings = Field(default_factory=ProviderSettings)
    groq: ProviderSettings = Field(default_factory=ProviderSettings)
    anthropic: ProviderSettings = Field(default_factory=ProviderSettings)
    ollama: OllamaSettings = Field(default_factory=OllamaSettings)

    # Runtime settings
    log_level: str = "INFO"
    log_json: bool = False
    host: str = "127.0.0.1"
    api_port: int = 8000

    def sections(self) -> Dict[str, ProviderSettings]:
        return {name: getattr(self, name) for name in SECTIONS}

    def resolved_api_key(self, section: str) -> Optional[str]:
        """Configured key, else the vendor environment variable. Never stored back."""
        ps: ProviderSettings = getattr(self, section)
        if ps.api_key and ps.api_key.strip():
            return ps.api_key
        env = VENDOR_KEY_ENV.get(section)
        return os.getenv(env) if env else None


_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    global _config
    _config = None


def load_config(path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file"""
    if path is None:
        path = DEFAULT_CONFIG_PATH

    if not path.exists():
        return Config()

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}

    config_data = {}
    for name in SECTIONS:
        if name in data:
            model = OllamaSettings if name == "ollama" else ProviderSettings
            config_data[name] = model(**(data[name] or {}))

    for key in ["log_level", "log_json", "host", "api_port"]:
        if key in data:
            config_data[key] = data[key]

    return Config(**config_data)


def save_config(config: Config, path: Optional[Path] = None):
    """Save configuration to YAML file"""
    if path is None:
        path = DEFAULT_CONFIG_PATH

    path.parent.mkdir(parents=True, exist_ok=True)

    data = {name: ps.model_dump() for name, ps in config.sections().items()}
    data.update({
        "log_level": config.log_level,
        "log_json": config.log_json,
        "host": config.host,
        "api_port": config.api_port,
    })

    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def run_wizard(path: Optional[Path] = None):
    """Interactive setup wizard"""
    from rich.console import Console
    from rich.prompt import Prompt, Confirm
    from rich.panel import Panel
    from rich.table import Table

    from .llm import PROVIDER_CLASSES

    console = Console()
    console.print("\n[bold blue]promptfan setup[/bold blue]\n")

    cfg = load_config(path)

    for name, ps in cfg.sections().items():
        cls = PROVIDER_CLASSES[name]
        console.print(Panel(f"[bold]{cls.name}[/bold]", title=name))
        ps.enabled = Confirm.ask("Enable?", default=ps.enabled)
        if not ps.enabled:
            continue
        if cls.requires_api_key:
            env = VENDOR_KEY_ENV.get(name)
            key = Prompt.ask(f"API key (enter to use ${env})", default=ps.api_key or "",
                             show_default=False, password=True)
            ps.api_key = key or None
        else:
            ps.base_url = Prompt.ask("Base URL", default=ps.base_url or "")
        models = ps.models or list(cls.available_models)
        ps.model = Prompt.ask("Default model", choices=models, default=ps.model or models[0])
        ps.temperature = float(Prompt.ask("Temperature", default=str(ps.temperature)))
        ps.max_tokens = int(Prompt.ask("Max tokens", default=str(ps.max_tokens)))

    save_config(cfg, path)

    table = Table(title="Configuration Summary")
    table.add_column("Provider")
    table.add_column("Enabled")
    table.add_column("Model")
    table.add_column("Key")
    for name, ps in cfg.sections().items():
        table.add_row(name, "yes" if ps.enabled else "no", ps.model or "-",
                      "set" if ps.api_key else "-")
    console.print(table)
    console.print("\n[bold green]Setup complete![/bold green]\n"
                  "Next steps:\n"
                  "  • List providers: [bold]promptfan providers[/bold]\n"
                  "  • Ask all of them: [bold]promptfan ask \"hello\"[/bold]\n"
                  "  • Start API: [bold]promptfan api[/bold]\n")
