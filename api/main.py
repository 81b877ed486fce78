from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from paceplan.config import get_settings
from paceplan.logging_config import new_request_id, reset_request_id, set_request_id, setup_logging

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0


def request_log_fields(*, method: str, path: str, status_code: int, duration_ms: float, client_ip: Optional[str]) -> dict[str, object]:
    return {
        "ctx_method": method,
        "ctx_path": path,
        "ctx_status_code": int(status_code),
        "ctx_duration_ms": round(float(duration_ms), 2),
        "ctx_client_ip": client_ip or "",
    }


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="Pace Plan API", version="1.0.0")
    app.include_router(router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_and_logging(request: Request, call_next: Callable) -> Response:
        header_name = settings.request_id_header_name or "X-Request-ID"
        request_id = (request.headers.get(header_name) or "").strip() or new_request_id()
        token = set_request_id(request_id)
        started_ms = monotonic_ms()
        client_ip = getattr(request.client, "host", None)
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = monotonic_ms() - started_ms
            logger.exception(
                "http_request_error",
                extra=request_log_fields(
                    method=request.method,
                    path=request.url.path,
                    status_code=500,
                    duration_ms=duration_ms,
                    client_ip=client_ip,
                ),
            )
            raise
        else:
            response.headers[header_name] = request_id
            duration_ms = monotonic_ms() - started_ms
            logger.info(
                "http_request",
                extra=request_log_fields(
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                    client_ip=client_ip,
                ),
            )
            return response
        finally:
            reset_request_id(token)

    return app


app = create_app()
