from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import Field
from datetime import datetime

from .base import BaseModel, TimestampMixin


class User(BaseModel, TimestampMixin, table=True):
    """Modelo de Usuario para la base de datos"""
    __tablename__ = "users"

    name: str = Field(max_length=100)
    email: str = Field(unique=True, index=True, max_length=255)
    # Hash bcrypt, nunca el texto plano
    password: str = Field(max_length=255)
    is_verified: bool = Field(default=False, description="Si el email está verificado")

    # Reseteo de contraseña: sólo se guarda el sha256 del secreto enviado por email
    reset_token: Optional[str] = Field(default=None, index=True, max_length=64)
    reset_token_expiry: Optional[datetime] = Field(default=None, sa_type=DateTime())
