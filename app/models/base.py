"""
Modelos base para la API Storefront
"""
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
import uuid

from app.core.security import utcnow


class BaseModel(SQLModel):
    """Modelo base con campos comunes para todas las entidades"""
    id: Optional[int] = Field(default=None, primary_key=True)
    id_ext: uuid.UUID = Field(default_factory=uuid.uuid4, unique=True, index=True)


class TimestampMixin(SQLModel):
    """Mixin para campos de timestamp comunes"""
    # Columnas sin zona horaria: siempre se guarda UTC naive (ver utcnow)
    created_at: datetime = Field(default_factory=utcnow, index=True, sa_type=DateTime())
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime())
