from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from app.core.security import utcnow


class SessionToken(SQLModel, table=True):
    __tablename__ = "session_tokens"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    jti: str = Field(index=True, unique=True, max_length=64)
    issued_at: datetime = Field(default_factory=utcnow, index=True, sa_type=DateTime())
    expires_at: datetime = Field(index=True, sa_type=DateTime())
    revoked_at: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime())
