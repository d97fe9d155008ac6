from shopcatalog.core.config import settings
from shopcatalog.core.database import Base, build_engine, build_session_maker, get_db
from shopcatalog.core.exceptions import (
    AppError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "settings",
    "Base",
    "build_engine",
    "build_session_maker",
    "get_db",
    "AppError",
    "NotFoundError",
    "ForbiddenError",
    "ValidationError",
    "InternalError",
]
