"""FastAPI application entrypoint.

Responsibilities kept minimal:
  * App construction from an explicit ``AppConfig``
  * Router registration (calendar)
  * Cross-cutting concerns: metrics middleware & exception handlers
"""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from .api.calendar import router as calendar_router
from .config import AppConfig
from .errors import BaseAppException, MissingInputError, UnexpectedError

logger = logging.getLogger(__name__)

# --- Metrics setup ---
REQUEST_COUNT = Counter(
    "calview_requests_total", "Total HTTP requests", ["method", "path", "status"]
)
REQUEST_LATENCY = Histogram(
    "calview_request_latency_seconds", "Latency of HTTP requests", ["method", "path"]
)


def create_app(config: AppConfig) -> FastAPI:
    app = FastAPI(title="Calview API", version="0.1.0")
    app.state.config = config

    # --- CORS (for local frontend dev) ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_allow_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(calendar_router)

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        path = request.url.path
        method = request.method
        with REQUEST_LATENCY.labels(method=method, path=path).time():
            response: Response = await call_next(request)
        REQUEST_COUNT.labels(method=method, path=path, status=str(response.status_code)).inc()
        return response

    @app.get("/metrics")
    def metrics():  # pragma: no cover - external scrape
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/healthz")
    async def health():
        return {"status": "ok"}

    @app.exception_handler(BaseAppException)
    async def app_exception_handler(request: Request, exc: BaseAppException):
        return JSONResponse(status_code=exc.http_status, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        err = MissingInputError()
        return JSONResponse(status_code=err.http_status, content=err.to_payload())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):  # pragma: no cover
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        err = UnexpectedError(details="unexpected error")
        return JSONResponse(status_code=err.http_status, content=err.to_payload())

    return app


def run():  # pragma: no cover - process bootstrap
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = AppConfig.from_env()
    uvicorn.run(create_app(config), host="0.0.0.0", port=config.port)
