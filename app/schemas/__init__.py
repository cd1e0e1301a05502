# Schemas
from .users import (
    UserCreate,
    UserRead,
    MessageResponse,
)

from .auth import (
    LoginRequest,
    LoginResponse,
    VerifyEmailRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
)

from .register import RegisterResponse

__all__ = [
    # Users
    "UserCreate",
    "UserRead",
    "MessageResponse",
    # Auth
    "LoginRequest",
    "LoginResponse",
    "VerifyEmailRequest",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "RegisterResponse",
]
