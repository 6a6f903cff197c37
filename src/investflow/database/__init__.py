from .base import Base
from .session import get_engine, get_session_maker, get_async_session, transaction

__all__ = [
    "Base",
    "get_engine",
    "get_session_maker",
    "get_async_session",
    "transaction",
]
