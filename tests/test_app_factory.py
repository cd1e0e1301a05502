import logging

from fastapi.testclient import TestClient
from sqlmodel import Session, select


def test_injected_database_url_backs_the_routes(tmp_path):
    from app.core.config import Settings
    from app.core.database import build_engine
    from app.main import create_app
    from app.models.user import User

    url = f"sqlite:///{tmp_path / 'injected.db'}"
    api = create_app(Settings(database_url=url, auto_create_db=True, email_backend="disabled"))
    assert str(api.state.engine.url) == url

    with TestClient(api) as client:
        res = client.post("/api/auth/register", json={"name": "Ann", "email": "ann@x.com", "password": "pw123"})
        assert res.status_code == 201

    engine = build_engine(url)
    with Session(engine) as session:
        user = session.exec(select(User)).one()
    engine.dispose()
    assert user.email == "ann@x.com"
    assert user.created_at.tzinfo is None


def test_unhandled_errors_are_logged_with_traceback(caplog):
    from app.core.config import Settings
    from app.main import create_app

    api = create_app(Settings())

    @api.get("/explode")
    def explode():
        raise RuntimeError("kaboom")

    with caplog.at_level(logging.ERROR, logger="app.core.errors"):
        with TestClient(api, raise_server_exceptions=False) as client:
            res = client.get("/explode")

    assert res.status_code == 500
    assert res.json()["code"] == "INTERNAL_ERROR"
    records = [r for r in caplog.records if r.getMessage() == "Unhandled error"]
    assert records
    assert isinstance(records[0].exc_info[1], RuntimeError)
    assert "kaboom" in caplog.text
