import logging
from contextlib import asynccontextmanager
from typing import Annotated, Optional

from fastapi import FastAPI, Depends, Header, HTTPException, Request
from jose import JWTError, jwt
from pydantic import BaseModel
from sqlalchemy.engine.base import Engine
from sqlmodel import Session, SQLModel

from restaurant_pos.db import run_migrations, create_db_engine
from restaurant_pos.settings import Settings

logger = logging.getLogger(__name__)

settings = Settings()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engine(request: Request) -> Engine:
    return request.app.state.engine


def get_session(engine: Engine = Depends(get_engine)):
    with Session(engine) as session:
        yield session

SessionDep = Annotated[Session, Depends(get_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


class CurrentUser(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


def get_current_user(settings: SettingsDep, authorization: Optional[str] = Header(default=None)) -> CurrentUser:
    """
    Проверяет Bearer-токен внешнего провайдера и возвращает личность вызывающего.
    """
    if not authorization:
        raise _unauthorized("Not authenticated")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise _unauthorized("Invalid authorization header")

    try:
        claims = jwt.decode(
            token,
            settings.auth_secret,
            algorithms=[settings.auth_algorithm],
            audience=settings.auth_audience,
            options={"verify_aud": settings.auth_audience is not None},
        )
    except JWTError as e:
        logger.warning(f"Rejected token: {e}")
        raise _unauthorized("Invalid or expired token")

    subject = claims.get("sub")
    if not subject:
        raise _unauthorized("Token has no subject")

    return CurrentUser(id=str(subject), email=claims.get("email"), name=claims.get("name"))

CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.settings = settings

    engine = create_db_engine(settings)
    if settings.run_migrations:
        run_migrations(settings)
    else:
        SQLModel.metadata.create_all(engine)
    app.state.engine = engine
    logger.info("Database engine ready")

    yield # Wait until the app shuts down

    engine.dispose()
    logger.info("Database engine disposed")
