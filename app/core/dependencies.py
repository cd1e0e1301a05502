"""
Dependencias compartidas: objetos construidos una vez en `create_app`
y guardados en `app.state`
"""
from typing import Annotated, Any, Dict, Tuple

from fastapi import BackgroundTasks, Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session

from app.core.config import Settings
from app.core.database import get_session
from app.models.user import User
from app.services.accounts import AccountService
from app.services.email_service import DeliveryStats, Mailer, NotificationDispatcher

# Sólo se usa en /me y /logout
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_delivery_stats(request: Request) -> DeliveryStats:
    return request.app.state.delivery_stats


def get_account_service(
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    mailer: Mailer = Depends(get_mailer),
    stats: DeliveryStats = Depends(get_delivery_stats),
) -> AccountService:
    notifier = NotificationDispatcher(mailer, stats, background_tasks)
    return AccountService(session, settings, notifier)


def get_current_session(
    token: Annotated[str, Depends(oauth2_scheme)],
    accounts: AccountService = Depends(get_account_service),
) -> Tuple[User, Dict[str, Any]]:
    """Obtener usuario actual y claims desde el token de sesión"""
    return accounts.authenticate(token)


def get_current_user(
    current: Tuple[User, Dict[str, Any]] = Depends(get_current_session),
) -> User:
    return current[0]
