# SQLAlchemy models
from .base import Base
from .state import StoredState

__all__ = [
    "Base",
    "StoredState",
]
