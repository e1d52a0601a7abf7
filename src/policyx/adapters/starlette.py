from __future__ import annotations

import functools
import inspect
from typing import Any, Awaitable, Callable, Optional

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ..core.authorizer import Authorizer
from ..core.errors import Unauthorized
from ..core.rules import ActionLike
from ._common import RequestGetter, deny_payload


def make_unauthorized_handler(add_headers: bool = False) -> Callable[[Request, Unauthorized], Awaitable[Response]]:
    """Build a Starlette exception handler that turns Unauthorized into a 403.

    Usage::

        app = Starlette(routes=..., exception_handlers={Unauthorized: make_unauthorized_handler()})
    """

    async def _handler(request: Request, exc: Unauthorized) -> Response:
        payload, headers = deny_payload(exc, add_headers)
        return JSONResponse(payload, status_code=exc.status_code, headers=headers)

    return _handler


unauthorized_handler = make_unauthorized_handler()


def require_permission(
    authorizer: Authorizer,
    action: ActionLike,
    get_actor: RequestGetter,
    get_subject: RequestGetter,
    policy: Optional[Any] = None,
) -> Callable[[Callable[..., Any]], Callable[[Request], Awaitable[Any]]]:
    """Endpoint decorator that authorizes *action* before the endpoint runs.

    *get_actor* and *get_subject* receive the request; either may be a
    coroutine function. A denial raises :class:`Unauthorized`, which the
    application maps with :func:`make_unauthorized_handler`. The decision runs
    in the threadpool.
    """

    async def _resolve(getter: RequestGetter, request: Request) -> Any:
        value = getter(request)
        if inspect.isawaitable(value):
            value = await value
        return value

    def _decorator(handler: Callable[..., Any]) -> Callable[[Request], Awaitable[Any]]:
        is_async = inspect.iscoroutinefunction(handler)

        @functools.wraps(handler)
        async def _endpoint(request: Request) -> Any:
            actor = await _resolve(get_actor, request)
            subject = await _resolve(get_subject, request)
            # predicates may block on I/O
            await run_in_threadpool(authorizer.authorize, actor, action, subject, policy)
            if is_async:
                return await handler(request)
            return await run_in_threadpool(handler, request)

        return _endpoint

    return _decorator


__all__ = ["make_unauthorized_handler", "require_permission", "unauthorized_handler"]
