from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .log import configure_logging
from .routers import transak
from .utils.cors import cors_headers

SERVICE_NAME = "transak-gateway"

ENDPOINTS = [
    "/api/transak/auth",
    "/api/transak/create-widget-url",
    "/api/transak/refresh-token",
]


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # sinks are set up when the server starts, not on import
        configure_logging(settings)
        logger.info(f"{SERVICE_NAME} ready: {settings!r}")
        yield

    app = FastAPI(title=SERVICE_NAME, version="1.0", lifespan=lifespan)
    app.state.settings = settings

    @app.middleware("http")
    async def cors(request: Request, call_next):
        headers = cors_headers(settings.cors_origins, request.headers.get("origin"))
        # preflight: answered before routing, no body
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=headers)
        response = await call_next(request)
        response.headers.update(headers)
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return JSONResponse(status_code=405, content={"error": "Method not allowed"})
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.get("/")
    def root():
        return {"ok": True, "service": SERVICE_NAME}

    @app.get("/health")
    def health():
        return {
            "ok": True,
            "service": SERVICE_NAME,
            "environment": settings.environment,
            "credentials_configured": settings.credentials_configured,
            "endpoints": ENDPOINTS,
        }

    app.include_router(transak.router)

    return app


app = create_app()
