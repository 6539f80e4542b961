# promptfan/llm/http.py
from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..errors import UpstreamError, UpstreamTimeoutError


async def post_json(vendor: str, url: str, payload: Dict[str, Any], *,
                    headers: Optional[Dict[str, str]] = None, timeout: float = 60.0,
                    transport: httpx.AsyncBaseTransport | None = None) -> Dict[str, Any]:
    """POST a JSON body and return the decoded JSON object.

    Transport faults, HTTP error statuses and non-object bodies all surface as
    `UpstreamError` (timeouts as `UpstreamTimeoutError`), with the vendor's own
    error message when the body carries one.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            r = await client.post(url, json=payload, headers=headers)
    except httpx.TimeoutException as e:
        raise UpstreamTimeoutError(f"{vendor} request timed out after {timeout:g}s") from e
    except httpx.RequestError as e:
        raise UpstreamError(f"{vendor} request failed: {e}") from e

    if r.status_code >= 400:
        raise UpstreamError(f"{vendor} error {r.status_code}: {_error_message(r)}",
                            status_code=r.status_code)
    try:
        data = r.json()
    except ValueError as e:
        raise UpstreamError(f"{vendor} returned invalid JSON") from e
    if not isinstance(data, dict):
        raise UpstreamError(f"{vendor} returned a non-object payload")
    return data


def _error_message(r: httpx.Response) -> str:
    try:
        data = r.json()
    except ValueError:
        return r.text.strip()[:200] or r.reason_phrase
    if isinstance(data, dict):
        err = data.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
    return r.reason_phrase
