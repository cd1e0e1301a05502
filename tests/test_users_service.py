import pytest
from sqlmodel import Session

from app.core.errors import ConflictError, NotFoundError
from app.services.users import UserService


def _create(session: Session, email="Store@Example.com "):
    return UserService.create_user(session, name=" Store ", email=email, password_hash="$2b$04$hash")


def test_create_user_normalizes_and_defaults(db_session: Session):
    user = _create(db_session)

    assert user.id is not None
    assert user.email == "store@example.com"
    assert user.name == "Store"
    assert user.is_verified is False
    assert user.reset_token is None
    assert user.reset_token_expiry is None


def test_create_user_duplicate_email_raises_conflict(db_session: Session):
    _create(db_session)
    with pytest.raises(ConflictError):
        _create(db_session, email="store@example.com")


def test_find_by_email_is_case_insensitive(db_session: Session):
    user = _create(db_session)
    assert UserService.get_user_by_email(db_session, "STORE@example.com").id == user.id
    assert UserService.get_user_by_email(db_session, "other@example.com") is None


def test_update_user_sets_fields(db_session: Session):
    user = _create(db_session)
    before = user.updated_at

    updated = UserService.update_user(db_session, user.id, is_verified=True, name="Renamed")
    assert updated.is_verified is True
    assert updated.name == "Renamed"
    assert updated.updated_at >= before


def test_update_missing_user_raises_not_found(db_session: Session):
    with pytest.raises(NotFoundError):
        UserService.update_user(db_session, 12345, is_verified=True)


def test_update_rejects_unknown_fields(db_session: Session):
    user = _create(db_session)
    with pytest.raises(ValueError):
        UserService.update_user(db_session, user.id, id=99)


def test_database_fault_is_reported_as_unexpected_failure(db_session: Session, monkeypatch):
    from sqlalchemy.exc import OperationalError

    from app.core.errors import UnexpectedFailure

    user = _create(db_session)

    def _broken_commit():
        raise OperationalError("UPDATE users", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", _broken_commit)
    with pytest.raises(UnexpectedFailure):
        UserService.update_user(db_session, user.id, name="Nope")


def test_update_to_taken_email_raises_conflict(db_session: Session):
    _create(db_session)
    other = _create(db_session, email="other@example.com")
    with pytest.raises(ConflictError):
        UserService.update_user(db_session, other.id, email="STORE@example.com")


@pytest.mark.parametrize(
    "table, columns",
    [
        ("users", ["created_at", "updated_at", "reset_token_expiry"]),
        ("session_tokens", ["issued_at", "expires_at", "revoked_at"]),
        ("menu_items", ["created_at", "updated_at"]),
    ],
)
def test_timestamp_columns_are_naive_datetimes(table, columns):
    from sqlalchemy import DateTime
    from sqlmodel import SQLModel

    import app.models  # noqa: F401

    for name in columns:
        column_type = SQLModel.metadata.tables[table].c[name].type
        assert type(column_type) is DateTime
        assert column_type.timezone is False


def test_reset_expiry_round_trips_as_naive_utc(db_session: Session):
    from datetime import timedelta

    from app.core.security import utcnow

    user = _create(db_session)
    expiry = utcnow() + timedelta(hours=1)
    updated = UserService.update_user(db_session, user.id, reset_token="ab" * 32, reset_token_expiry=expiry)

    assert updated.reset_token_expiry == expiry
    assert updated.reset_token_expiry.tzinfo is None
