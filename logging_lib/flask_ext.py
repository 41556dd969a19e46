"""Flask integration helpers for logging_lib."""

from __future__ import annotations

import time
import uuid
from typing import Any

from flask import Flask, Response, g, request

from .config import get_settings
from .logger import get_logger, pop_context, push_context


def register_flask_context(app: Flask, *, service: str | None = None) -> None:
    """Attach request lifecycle hooks for structured logging."""

    settings = get_settings()
    component = service or settings.service
    request_id_header = settings.request_id_header
    logger = get_logger(f"{component}.http")

    @app.before_request
    def _logging_before_request() -> None:
        g._logging_start = time.perf_counter()
        rid = (request.headers.get(request_id_header) or "").strip()
        if not rid:
            rid = uuid.uuid4().hex[:16]
        g.request_id = rid

        g._logging_token = push_context(
            rid=rid,
            method=request.method,
            path=request.path,
        )

    @app.after_request
    def _logging_after_request(response: Response) -> Response:
        rid = g.get("request_id")
        route = request.url_rule.rule if request.url_rule else request.path

        logger.info(
            "http_request",
            route=route,
            method=request.method,
            status=response.status_code,
            lat_ms=_elapsed_ms(g.get("_logging_start")),
            rid=rid,
            tenant_id=g.get("tenant_id"),
        )

        if rid:
            response.headers.setdefault(request_id_header, rid)
        return response

    @app.teardown_request
    def _logging_teardown(exc: Any) -> None:
        token = g.pop("_logging_token", None)
        if exc is not None:
            logger.error(
                "http_exception",
                route=request.path,
                method=request.method,
                lat_ms=_elapsed_ms(g.get("_logging_start")),
                rid=g.get("request_id"),
                context={"exception": type(exc).__name__, "message": str(exc)},
            )
        if token is not None:
            pop_context(token)


def _elapsed_ms(start: float | None) -> float:
    if start is None:
        return 0.0
    return round((time.perf_counter() - start) * 1000.0, 3)
