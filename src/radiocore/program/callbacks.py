"""
Callbacks from the generated program back into the external HTTP API.

The engine shells out to ``curl`` and posts form fields to
``{internal_api_url}/api/internal/{station_id}/{endpoint}``. Runtime values
(credentials, metadata) are quoted by the engine itself through string
concatenation; only the fixed parts are rendered here.
"""

from __future__ import annotations

from collections.abc import Mapping

from ..domain.entities import Station
from ..infra.settings import settings
from .builder import Call, Concat, Expr, Str

ENDPOINTS = frozenset({"auth", "djon", "djoff", "feedback"})


def api_url(station: Station, endpoint: str, base_url: str | None = None) -> str:
    if endpoint not in ENDPOINTS:
        raise ValueError(f"Unknown internal endpoint: {endpoint}")
    base = (base_url or settings.internal_api_url).rstrip("/")
    return f"{base}/api/internal/{station.id}/{endpoint}"


def api_command(
    station: Station,
    endpoint: str,
    params: Mapping[str, Expr] | None = None,
    *,
    base_url: str | None = None,
) -> Call:
    """Expression yielding the first line of the API's response ("" if none)."""
    fields: dict[str, Expr] = dict(params or {})
    fields["api_auth"] = Str(station.adapter_api_key or "")

    parts: list[str | Expr] = [f"curl -s --request POST --url {api_url(station, endpoint, base_url)}"]
    for key, value in fields.items():
        parts.append(f" --form {key}=")
        parts.append(value)

    return Call("list.hd", Call("get_process_lines", Concat(*parts)), default="")
