"""
Servicio CRUD para usuarios
"""
import logging
from typing import Any, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from app.core.errors import ConflictError, NotFoundError, UnexpectedFailure
from app.core.security import utcnow
from app.models.user import User

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({
    "name",
    "email",
    "password",
    "is_verified",
    "reset_token",
    "reset_token_expiry",
})


def normalize_email(email: str) -> str:
    return email.lower().strip()


def _commit(session: Session) -> None:
    try:
        session.commit()
    except IntegrityError:
        # Email duplicado (p. ej. dos registros simultáneos)
        session.rollback()
        raise ConflictError()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Error de base de datos al guardar usuario")
        raise UnexpectedFailure() from e


class UserService:
    """Servicio para operaciones CRUD de usuarios"""

    @staticmethod
    def get_user_by_id(session: Session, user_id: int) -> Optional[User]:
        """Obtener usuario por ID"""
        return session.get(User, user_id)

    @staticmethod
    def get_user_by_email(session: Session, email: str) -> Optional[User]:
        """Obtener usuario por email (case-insensitive)"""
        statement = select(User).where(User.email == normalize_email(email))
        return session.exec(statement).first()

    @staticmethod
    def get_user_by_reset_token(session: Session, token_hash: str) -> Optional[User]:
        """Obtener usuario por hash de secreto de reseteo"""
        statement = select(User).where(User.reset_token == token_hash)
        return session.exec(statement).first()

    @staticmethod
    def create_user(
        session: Session,
        *,
        name: str,
        email: str,
        password_hash: str,
    ) -> User:
        """
        Crear un nuevo usuario sin verificar

        Args:
            session: Sesión de base de datos
            name: Nombre para mostrar
            email: Email único
            password_hash: Hash bcrypt de la contraseña

        Returns:
            Usuario creado

        Raises:
            ConflictError: si el email ya está registrado
        """
        email_normalized = normalize_email(email)
        if UserService.get_user_by_email(session, email_normalized):
            raise ConflictError()

        db_user = User(
            name=name.strip(),
            email=email_normalized,
            password=password_hash,
            is_verified=False,
        )

        session.add(db_user)
        _commit(session)
        session.refresh(db_user)
        return db_user

    @staticmethod
    def update_user(session: Session, user_id: int, **fields: Any) -> User:
        """
        Actualizar campos de un usuario

        Raises:
            NotFoundError: si el usuario no existe
            ValueError: si se pasa un campo no actualizable
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Campos no actualizables: {', '.join(sorted(unknown))}")

        db_user = session.get(User, user_id)
        if db_user is None:
            raise NotFoundError()

        for key, value in fields.items():
            if key == "email" and value is not None:
                value = normalize_email(value)
            setattr(db_user, key, value)
        db_user.updated_at = utcnow()

        session.add(db_user)
        _commit(session)
        session.refresh(db_user)
        return db_user
