"""
Esquemas Pydantic para usuarios (API)
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from datetime import datetime
import uuid


class UserCreate(BaseModel):
    """Esquema para registrar usuario"""
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=1, description="Contraseña en texto plano (será hasheada)")


class UserRead(BaseModel):
    """
    Usuario saneado para respuestas.

    No incluye password, reset_token ni reset_token_expiry.
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    id_ext: uuid.UUID
    name: str
    email: EmailStr
    is_verified: bool
    created_at: datetime
    updated_at: datetime


# Respuestas genéricas
class MessageResponse(BaseModel):
    """Respuesta genérica con mensaje"""
    message: str
