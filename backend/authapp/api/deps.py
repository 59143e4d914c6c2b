"""Helpers shared by the v1 route handlers."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, g, jsonify, request

from authapp.core.errors import Unauthorized
from authapp.services._shared.dto import Principal

F = TypeVar("F", bound=Callable[..., Any])


def current_principal() -> Principal:
    """Return the principal attached by the session boundary.

    :raises Unauthorized: When no session check ran for this request.
    """

    principal = g.get("principal")
    if principal is None:
        raise Unauthorized("Please sign in to continue.", code="unauthenticated")
    return principal


def json_response(payload: Any, *, status: int = 200) -> Response:
    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Log how long the wrapped handler took, in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            current_app.logger.debug(
                "request.elapsed",
                extra={
                    "endpoint": request.endpoint,
                    "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )

    return wrapper  # type: ignore[return-value]
