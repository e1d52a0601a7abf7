from __future__ import annotations

from typing import Any, Callable, Dict, Tuple

from ..core.errors import Unauthorized

# (request) -> actor / subject
RequestGetter = Callable[[Any], Any]


def deny_payload(exc: Unauthorized, add_headers: bool = False) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """Body and headers of the 403 response for *exc*."""
    payload: Dict[str, Any] = {"detail": "Forbidden"}
    headers: Dict[str, str] = {}
    if add_headers:
        headers["X-Policyx-Action"] = str(exc.action)
        headers["X-Policyx-Subject"] = str(exc.subject_type)
    return payload, headers
