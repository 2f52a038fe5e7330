from typing import Mapping

from constants import UNKNOWN_CLIENT


def _header(headers: Mapping[str, str], name: str):
    value = headers.get(name)
    if value is None:
        # Plain dicts are case-sensitive; Starlette Headers are not
        for key, candidate in headers.items():
            if key.lower() == name:
                return candidate
    return value


def get_client_ip(headers: Mapping[str, str]) -> str:
    """
    Best-effort client identifier from proxy headers.

    Priority: first entry of X-Forwarded-For, then X-Real-IP, then "unknown".
    Clients behind the same proxy without these headers share one identifier.
    """
    forwarded = _header(headers, "x-forwarded-for")
    if forwarded:
        # Take the first IP in the chain
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = _header(headers, "x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return UNKNOWN_CLIENT
