from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple
from jose import JWTError, jwt
import bcrypt
import hashlib
import hmac
import logging
import secrets
import uuid
from app.core.config import Settings
from app.core.errors import InvalidTokenError

# Configurar logging
logger = logging.getLogger(__name__)

VERIFICATION_TOKEN_TYPE = "email_verification"
SESSION_TOKEN_TYPE = "access"

RESET_SECRET_BYTES = 32


def utcnow() -> datetime:
    """Hora UTC actual sin tzinfo, tal como se guarda en la base"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _truncate_password_safely(password: str) -> bytes:
    """
    Truncar contraseña de forma segura a 72 bytes para bcrypt.
    Retorna bytes directamente para evitar problemas de codificación.
    """
    password_bytes = password.encode('utf-8')
    if len(password_bytes) <= 72:
        return password_bytes
    return password_bytes[:72]


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verificar contraseña plana contra hash usando bcrypt directamente"""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            _truncate_password_safely(plain_password),
            hashed_password.encode('utf-8'),
        )
    except ValueError as e:
        # Hash con formato inválido
        logger.error(f"Error al verificar contraseña: {e}")
        return False


def get_password_hash(password: str, rounds: int = 12) -> str:
    """Generar hash de contraseña usando bcrypt directamente"""
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(_truncate_password_safely(password), salt)
    return hashed.decode('utf-8')


def compute_reset_secret_hash(raw_secret: str) -> str:
    return hashlib.sha256(raw_secret.encode("utf-8")).hexdigest()


def generate_reset_secret() -> Tuple[str, str]:
    """Generar un secreto de reseteo: (texto plano para el email, hash para la base)"""
    raw_secret = secrets.token_bytes(RESET_SECRET_BYTES).hex()
    return raw_secret, compute_reset_secret_hash(raw_secret)


def reset_secret_matches(candidate: str, stored_hash: Optional[str]) -> bool:
    if not candidate or not stored_hash:
        return False
    return hmac.compare_digest(compute_reset_secret_hash(candidate), stored_hash)


class TokenIssuer:
    """
    Emite y valida tokens JWT firmados con el secreto compartido.

    La validación no consulta la base de datos: un token es válido mientras
    la firma coincida y no haya pasado su `exp`.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        self.secret_key = secret_key
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(settings.secret_key, settings.jwt_algorithm)

    def issue(self, claims: Dict[str, Any], ttl: timedelta) -> str:
        """Crear token firmado con vencimiento absoluto `ahora + ttl`"""
        now = utcnow()
        to_encode = claims.copy()
        to_encode.update({
            "iat": int(now.replace(tzinfo=timezone.utc).timestamp()),
            "exp": int((now + ttl).replace(tzinfo=timezone.utc).timestamp()),
        })
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str, token_type: Optional[str] = None) -> Dict[str, Any]:
        """Verificar y decodificar token JWT"""
        if not token:
            raise InvalidTokenError()
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise InvalidTokenError()

        if token_type is not None and payload.get("type") != token_type:
            raise InvalidTokenError()
        if payload.get("sub") is None:
            raise InvalidTokenError()
        return payload

    def issue_verification_token(self, user_id: int, ttl: timedelta) -> str:
        return self.issue({"sub": str(user_id), "type": VERIFICATION_TOKEN_TYPE}, ttl)

    def issue_session_token(self, user_id: int, email: str, ttl: timedelta) -> Tuple[str, str, datetime]:
        """Crear token de sesión; retorna (token, jti, vencimiento)"""
        jti = uuid.uuid4().hex
        expires_at = utcnow() + ttl
        token = self.issue(
            {"sub": str(user_id), "email": email, "type": SESSION_TOKEN_TYPE, "jti": jti},
            ttl,
        )
        return token, jti, expires_at
