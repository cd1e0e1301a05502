"""
Modelos SQLModel para la API Storefront
"""

from .base import BaseModel, TimestampMixin
from .user import User
from .session_token import SessionToken
from .catalog import (
    MenuItem,
    MenuItemRead,
    Product,
    ProductRead,
)

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "User",
    "SessionToken",
    "MenuItem",
    "MenuItemRead",
    "Product",
    "ProductRead",
]
