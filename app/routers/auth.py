"""
Router de autenticación
"""
from typing import Any, Dict, Tuple
from fastapi import APIRouter, Depends, Query, status

from app.core.dependencies import get_account_service, get_current_session, get_current_user
from app.models.user import User
from app.schemas.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    ResetPasswordRequest,
    VerifyEmailRequest,
)
from app.schemas.register import RegisterResponse
from app.schemas.users import MessageResponse, UserCreate, UserRead
from app.services.accounts import AccountService

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register_user(user: UserCreate, accounts: AccountService = Depends(get_account_service)):
    """
    Registrar un nuevo usuario

    El usuario queda sin verificar y recibe un email con el link de
    verificación (vence en 1 hora).
    """
    db_user = accounts.register(name=user.name, email=user.email, password=user.password)
    return RegisterResponse(
        message="User registered successfully. Please check your email to verify your account.",
        user=UserRead.model_validate(db_user),
    )


@router.post("/verify-email", response_model=MessageResponse)
def verify_email(payload: VerifyEmailRequest, accounts: AccountService = Depends(get_account_service)):
    """Verificar email con el token recibido"""
    accounts.verify_email(payload.token)
    return MessageResponse(message="Email verified successfully.")


@router.get("/confirm", response_model=MessageResponse)
def confirm_email(
    token: str = Query(min_length=1),
    accounts: AccountService = Depends(get_account_service),
):
    """Alias GET de /verify-email para links con ?token="""
    accounts.verify_email(token)
    return MessageResponse(message="Email verified successfully.")


@router.post("/login", response_model=LoginResponse)
def login_user(user_login: LoginRequest, accounts: AccountService = Depends(get_account_service)):
    """
    Iniciar sesión con JSON

    - **email**: Email del usuario
    - **password**: Contraseña

    Retorna un token JWT válido por 1 día
    """
    token, user = accounts.login(email=user_login.email, password=user_login.password)
    return LoginResponse(
        message="Login successful",
        token=token,
        token_type="bearer",
        expires_in=int(accounts.session_ttl.total_seconds()),
        user=UserRead.model_validate(user),
    )


@router.post("/forgot-password", response_model=MessageResponse)
def forgot_password(payload: ForgotPasswordRequest, accounts: AccountService = Depends(get_account_service)):
    accounts.forgot_password(payload.email)
    return MessageResponse(message="Password reset link sent to your email.")


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(payload: ResetPasswordRequest, accounts: AccountService = Depends(get_account_service)):
    """Cambiar la contraseña con el secreto del link de reseteo"""
    accounts.reset_password(token=payload.token, new_password=payload.password)
    return MessageResponse(message="Password has been reset successfully.")


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_user)):
    """
    Obtener información del usuario autenticado

    Requiere token JWT válido en el header:
    Authorization: Bearer <token>
    """
    return UserRead.model_validate(current_user)


@router.post("/logout", response_model=MessageResponse)
def logout(
    current: Tuple[User, Dict[str, Any]] = Depends(get_current_session),
    accounts: AccountService = Depends(get_account_service),
):
    _, claims = current
    accounts.logout(claims)
    return MessageResponse(message="Logged out")
