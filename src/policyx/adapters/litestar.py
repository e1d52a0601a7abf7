from __future__ import annotations

import logging
from typing import Any, Callable

from litestar import Request, Response

from ..core.errors import Unauthorized
from ._common import deny_payload

logger = logging.getLogger(__name__)


def make_unauthorized_handler(add_headers: bool = False) -> Callable[[Request, Unauthorized], Response]:
    """Litestar exception handler mapping Unauthorized to a 403 JSON response.

    Usage::

        app = Litestar(route_handlers=[...], exception_handlers={Unauthorized: make_unauthorized_handler()})
    """

    def _handler(request: Request[Any, Any, Any], exc: Unauthorized) -> Response[Any]:
        logger.debug("policyx: %s %s denied", request.method, request.url.path)
        payload, headers = deny_payload(exc, add_headers)
        return Response(content=payload, status_code=exc.status_code, headers=headers)

    return _handler


unauthorized_handler = make_unauthorized_handler()

__all__ = ["make_unauthorized_handler", "unauthorized_handler"]
