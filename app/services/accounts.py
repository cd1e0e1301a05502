"""
Ciclo de vida de cuentas: registro, verificación de email, login y reseteo
de contraseña
"""
import logging
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from sqlmodel import Session

from app.core.config import Settings
from app.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidTokenError,
    NotFoundError,
    UnauthorizedError,
)
from app.core.security import (
    SESSION_TOKEN_TYPE,
    VERIFICATION_TOKEN_TYPE,
    TokenIssuer,
    compute_reset_secret_hash,
    generate_reset_secret,
    get_password_hash,
    reset_secret_matches,
    utcnow,
    verify_password,
)
from app.models.user import User
from app.services import session_tokens
from app.services.email_service import (
    NotificationDispatcher,
    build_password_reset_email,
    build_verification_email,
)
from app.services.users import UserService

logger = logging.getLogger(__name__)


class AccountService:
    """Orquesta el almacén de credenciales, los tokens y los emails"""

    def __init__(
        self,
        session: Session,
        settings: Settings,
        notifier: NotificationDispatcher,
        issuer: Optional[TokenIssuer] = None,
    ):
        self.session = session
        self.settings = settings
        self.notifier = notifier
        self.issuer = issuer or TokenIssuer.from_settings(settings)

    @property
    def verification_ttl(self) -> timedelta:
        return timedelta(minutes=self.settings.verification_token_expire_minutes)

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(minutes=self.settings.session_token_expire_minutes)

    @property
    def reset_ttl(self) -> timedelta:
        return timedelta(minutes=self.settings.password_reset_expire_minutes)

    def _link(self, path: str) -> str:
        return f"{self.settings.frontend_url.rstrip('/')}{path}"

    def register(self, *, name: str, email: str, password: str) -> User:
        """
        Registrar usuario sin verificar y enviarle el link de verificación

        Raises:
            ConflictError: si el email ya está registrado
        """
        if UserService.get_user_by_email(self.session, email):
            raise ConflictError()

        password_hash = get_password_hash(password, rounds=self.settings.bcrypt_rounds)
        user = UserService.create_user(
            self.session,
            name=name,
            email=email,
            password_hash=password_hash,
        )
        logger.info("Usuario registrado id=%s", user.id)

        token = self.issuer.issue_verification_token(user.id, self.verification_ttl)
        self.notifier.dispatch(
            build_verification_email(
                app_name=self.settings.app_name,
                to_email=user.email,
                verification_link=self._link(f"/verify-email?token={token}"),
                expires_in_minutes=self.settings.verification_token_expire_minutes,
            )
        )
        return user

    def verify_email(self, token: str) -> User:
        """
        Marcar como verificado al usuario del token

        Raises:
            InvalidTokenError: firma inválida o token vencido
            NotFoundError: el usuario del token ya no existe
        """
        claims = self.issuer.verify(token, token_type=VERIFICATION_TOKEN_TYPE)
        try:
            user_id = int(claims["sub"])
        except (TypeError, ValueError):
            raise InvalidTokenError()

        user = UserService.get_user_by_id(self.session, user_id)
        if user is None:
            raise NotFoundError()
        if user.is_verified:
            return user

        user = UserService.update_user(self.session, user.id, is_verified=True)
        logger.info("Email verificado para usuario id=%s", user.id)
        return user

    def login(self, *, email: str, password: str) -> Tuple[str, User]:
        """
        Autenticar y emitir un token de sesión

        Raises:
            NotFoundError: no existe el email
            ForbiddenError: el email no está verificado
            UnauthorizedError: contraseña incorrecta
        """
        user = UserService.get_user_by_email(self.session, email)
        if user is None:
            raise NotFoundError()

        if not user.is_verified:
            logger.info("Login rechazado para usuario id=%s: email sin verificar", user.id)
            raise ForbiddenError()

        if not verify_password(password, user.password):
            logger.info("Login rechazado para usuario id=%s: credenciales inválidas", user.id)
            raise UnauthorizedError()

        token, jti, expires_at = self.issuer.issue_session_token(user.id, user.email, self.session_ttl)
        session_tokens.store_session_token(
            self.session,
            user_id=user.id,
            jti=jti,
            expires_at=expires_at,
        )
        return token, user

    def forgot_password(self, email: str) -> None:
        """
        Guardar un nuevo secreto de reseteo y enviarlo por email

        Raises:
            NotFoundError: no existe el email
        """
        user = UserService.get_user_by_email(self.session, email)
        if user is None:
            raise NotFoundError()

        raw_secret, secret_hash = generate_reset_secret()
        UserService.update_user(
            self.session,
            user.id,
            reset_token=secret_hash,
            reset_token_expiry=utcnow() + self.reset_ttl,
        )
        logger.info("Reseteo de contraseña solicitado para usuario id=%s", user.id)

        self.notifier.dispatch(
            build_password_reset_email(
                app_name=self.settings.app_name,
                to_email=user.email,
                reset_link=self._link(f"/reset-password/{raw_secret}"),
                expires_in_minutes=self.settings.password_reset_expire_minutes,
            )
        )

    def reset_password(self, *, token: str, new_password: str) -> User:
        """
        Consumir el secreto de reseteo y cambiar la contraseña

        El secreto es de un solo uso: se borra junto con su vencimiento y se
        revocan las sesiones abiertas del usuario.

        Raises:
            InvalidTokenError: secreto desconocido o vencido
        """
        user = UserService.get_user_by_reset_token(self.session, compute_reset_secret_hash(token))
        if user is None or not reset_secret_matches(token, user.reset_token):
            raise InvalidTokenError()
        if user.reset_token_expiry is None:
            raise InvalidTokenError()
        if user.reset_token_expiry <= utcnow():
            raise InvalidTokenError()

        user = UserService.update_user(
            self.session,
            user.id,
            password=get_password_hash(new_password, rounds=self.settings.bcrypt_rounds),
            reset_token=None,
            reset_token_expiry=None,
        )
        revoked = session_tokens.revoke_user_session_tokens(self.session, user.id)
        logger.info("Contraseña reseteada para usuario id=%s (%s sesiones revocadas)", user.id, revoked)
        return user

    def authenticate(self, token: str) -> Tuple[User, Dict[str, Any]]:
        """
        Resolver el usuario de un token de sesión

        Raises:
            UnauthorizedError: token inválido, revocado o usuario inexistente
        """
        try:
            claims = self.issuer.verify(token, token_type=SESSION_TOKEN_TYPE)
        except InvalidTokenError:
            raise UnauthorizedError("Could not validate credentials")

        if not session_tokens.is_session_token_active(self.session, claims.get("jti")):
            raise UnauthorizedError("Could not validate credentials")

        try:
            user = UserService.get_user_by_id(self.session, int(claims["sub"]))
        except (TypeError, ValueError):
            user = None
        if user is None:
            raise UnauthorizedError("Could not validate credentials")
        return user, claims

    def logout(self, claims: Dict[str, Any]) -> None:
        record = session_tokens.get_session_token_by_jti(self.session, claims.get("jti", ""))
        if record is not None and record.revoked_at is None:
            session_tokens.revoke_session_token(self.session, record)
