"""
Esquemas Pydantic para autenticación
"""
from pydantic import BaseModel, EmailStr, Field

from app.schemas.users import UserRead


class LoginRequest(BaseModel):
    """Esquema para login con JSON"""
    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    expires_in: int  # segundos
    user: UserRead


class VerifyEmailRequest(BaseModel):
    token: str = Field(min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=1)
