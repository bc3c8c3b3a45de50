from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.routing import Match

from config.settings import Settings, get_settings
from loader.metrics import HTTP_LATENCY, HTTP_REQUESTS
from loader.service import LoadService, build_service
from loader.workload import WorkloadMode


logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger("serverloader")

UNMATCHED_PATH = "unmatched"


def get_service(request: Request) -> LoadService:
    return request.app.state.service


def create_app(
    settings: Optional[Settings] = None, service: Optional[LoadService] = None
) -> FastAPI:
    settings = settings or get_settings()
    service = service or build_service(settings)

    # Swagger UI only in development environments.
    docs_url = "/docs" if settings.is_development else None
    openapi_url = "/openapi.json" if settings.is_development else None
    app = FastAPI(
        title="Server Loader",
        version="1.0.0",
        docs_url=docs_url,
        redoc_url=None,
        openapi_url=openapi_url,
    )
    app.state.service = service

    @app.get("/workout", response_class=PlainTextResponse, name="GetWorkout")
    def workout(svc: LoadService = Depends(get_service)) -> str:
        try:
            item = svc.workout()
        except Exception as e:
            logger.exception("Workout failed: %s", e)
            raise HTTPException(status_code=500, detail=str(e))
        return str(item)

    @app.get("/stats", response_class=PlainTextResponse, name="GetStats")
    def stats(svc: LoadService = Depends(get_service)) -> str:
        return svc.stats().render()

    @app.get("/healthz", response_class=PlainTextResponse, name="GetHealthz")
    def healthz() -> str:
        return "OK"

    if service.mode is WorkloadMode.NTH_PRIME:
        _add_prime_routes(app)

    logger.info("App created: env=%s mode=%s", settings.app_env, service.mode.value)
    return app


def _route_path(request: Request) -> str:
    # Route templates keep the label set bounded; unknown paths share one series.
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", UNMATCHED_PATH)
    return UNMATCHED_PATH


def _add_prime_routes(app: FastAPI) -> None:
    @app.middleware("http")
    async def observe(request: Request, call_next):
        path = _route_path(request)
        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start
        host = request.headers.get("host", "")
        HTTP_REQUESTS.labels(
            host=host,
            method=request.method,
            path=path,
            status=str(response.status_code),
        ).inc()
        HTTP_LATENCY.labels(host=host, path=path).observe(duration)
        return response

    @app.get("/", response_class=PlainTextResponse)
    def index() -> str:
        return "App is up"

    @app.get("/metrics")
    def metrics() -> Response:
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
