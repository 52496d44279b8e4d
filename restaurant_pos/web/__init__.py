"""
Главный модуль FastAPI приложения.

Содержит инициализацию приложения, регистрацию роутеров и обработчики ошибок.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from restaurant_pos.dependencies import lifespan, settings

from .analytics_api import router as analytics_router
from .health import router as health_router
from .menu_api import router as menu_router
from .order_api import router as order_router
from .tables_api import router as tables_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Restaurant POS API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router)
app.include_router(menu_router)
app.include_router(tables_router)
app.include_router(order_router)
app.include_router(analytics_router)


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    """Нарушение уникальности или внешнего ключа. Сессия к этому моменту уже откатана."""
    logger.warning(f"Constraint violation on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content={"error": "constraint_violation", "message": str(exc.orig)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )
