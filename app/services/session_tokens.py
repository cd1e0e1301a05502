from datetime import datetime
from typing import Optional

from sqlmodel import Session, select

from app.core.security import utcnow
from app.models.session_token import SessionToken


def get_session_token_by_jti(session: Session, jti: str) -> Optional[SessionToken]:
    statement = select(SessionToken).where(SessionToken.jti == jti)
    return session.exec(statement).first()


def store_session_token(
    session: Session,
    *,
    user_id: int,
    jti: str,
    expires_at: datetime,
) -> SessionToken:
    record = SessionToken(
        user_id=user_id,
        jti=jti,
        expires_at=expires_at,
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def is_session_token_active(session: Session, jti: Optional[str]) -> bool:
    if not jti:
        return False
    record = get_session_token_by_jti(session, jti)
    if record is None or record.revoked_at is not None:
        return False
    return record.expires_at > utcnow()


def revoke_session_token(session: Session, record: SessionToken) -> SessionToken:
    record.revoked_at = utcnow()
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def revoke_user_session_tokens(session: Session, user_id: int) -> int:
    """Revocar todas las sesiones activas de un usuario; retorna cuántas"""
    tokens = session.exec(
        select(SessionToken)
        .where(SessionToken.user_id == user_id)
        .where(SessionToken.revoked_at.is_(None))
    ).all()
    now = utcnow()
    for t in tokens:
        t.revoked_at = now
        session.add(t)
    session.commit()
    return len(tokens)
