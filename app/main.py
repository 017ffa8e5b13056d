"""Aplicación principal FastAPI del comparador de ofertas"""
import logging
import sys
import uuid
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from fastapi.openapi.utils import get_openapi
from starlette.exceptions import HTTPException as StarletteHTTPException

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars
from prometheus_fastapi_instrumentator import Instrumentator

from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.database import create_database
from app.core.exceptions import AppError
from app.api.v1.api import api_router
from app.api.v1.routers.health import router as health_router

# Configurar structlog
log_level_name = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL
log_level = getattr(logging, log_level_name.upper(), logging.INFO)
logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stdout)

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer() if settings.DEBUG else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(log_level),
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)

# Mensajes de error centralizados
ERROR_MESSAGES = {
    "GENERIC": "Error interno del servidor",
    "DATABASE": "Error en base de datos",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Iniciando API del comparador de ofertas...", version=settings.PROJECT_VERSION)
    if settings.DB_CREATE_TABLES:
        create_database()
    try:
        yield
    finally:
        logger.info("Cerrando aplicación...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description="""
    API REST para comparar ofertas de productos entre supermercados.

    * Listado, búsqueda y filtrado de ofertas con paginación
    * Mejor precio por producto, descuentos y estadísticas de precio
    * Gestión de productos, categorías, supermercados y usuarios con roles
    """,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS y TrustedHosts
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
if not settings.DEBUG:
    app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.ALLOWED_HOSTS)


# Middleware de logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    bind_contextvars(request_id=request_id, user_id="anonymous")

    start = time.time()
    logger.info("Request", method=request.method, url=str(request.url))
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Error procesando request")
        clear_contextvars()
        raise

    elapsed = round(time.time() - start, 3)
    logger.info("Response", status_code=response.status_code, process_time=elapsed, path=request.url.path)
    response.headers["X-Process-Time"] = str(elapsed)
    response.headers["X-Request-ID"] = request_id
    clear_contextvars()
    return response


def error_response(
    request: Request,
    status_code: int,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Respuesta de error con el formato común de la API"""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "code": status_code,
                "message": message,
                "path": str(request.url.path),
                "details": details or None,
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


# Exception handlers
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("Error interno", message=exc.message)
    else:
        logger.info("Error de aplicación", status_code=exc.status_code, message=exc.message)
    return error_response(request, exc.status_code, exc.message, exc.details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(request, exc.status_code, exc.detail or ERROR_MESSAGES["GENERIC"])


@app.exception_handler(SQLAlchemyError)
async def db_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Error en base de datos")
    return error_response(request, 500, ERROR_MESSAGES["DATABASE"])


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Error no manejado")
    return error_response(request, 500, ERROR_MESSAGES["GENERIC"])


# Routers
app.include_router(health_router)
app.include_router(api_router, prefix=settings.API_V1_STR)

# Prometheus metrics
if settings.ENABLE_METRICS:
    Instrumentator().instrument(app).expose(app, include_in_schema=False)


# OpenAPI custom
def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    schema = get_openapi(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        description=app.description,
        routes=app.routes,
    )
    schema["components"].setdefault("securitySchemes", {})["HTTPBearer"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    schema["tags"] = [
        {"name": "Ofertas", "description": "Listado, búsqueda y gestión de ofertas"},
        {"name": "Productos", "description": "Productos con su mejor precio"},
        {"name": "Categorías", "description": "Categorías de productos"},
        {"name": "Supermercados", "description": "Supermercados y sus estadísticas"},
        {"name": "Usuarios", "description": "Registro, autenticación y administración"},
        {"name": "Health", "description": "Monitoreo y estado del sistema"},
    ]
    app.openapi_schema = schema
    return schema


app.openapi = custom_openapi


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "API del comparador de ofertas",
        "version": settings.PROJECT_VERSION,
        "health_url": "/health",
        "docs_url": "/docs",
        "api_url": settings.API_V1_STR,
    }


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
