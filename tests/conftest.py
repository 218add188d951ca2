import pytest
from fastapi.testclient import TestClient
from kanban_api.config import Settings
from kanban_api.main import create_app
from kanban_api.models.user import User
from kanban_api.seed import seed_business_units, seed_users

ADMIN = ("admin", "admin123")
JOHN = ("john", "user123")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        secret_key="test-secret",
        database_url=f"sqlite:///{tmp_path / 'kanban.db'}",
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    with app.state.session_factory() as session:
        seed_business_units(session)
        seed_users(session)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_ids(db):
    return {u.username: u.id for u in db.query(User).all()}


@pytest.fixture
def login(client):
    def _login(username: str, password: str) -> str:
        r = client.post("/api/auth/login", json={"username": username, "password": password})
        assert r.status_code == 200, r.text
        return r.json()["token"]

    return _login


@pytest.fixture
def admin_headers(login):
    return {"Authorization": f"Bearer {login(*ADMIN)}"}


@pytest.fixture
def john_headers(login):
    return {"Authorization": f"Bearer {login(*JOHN)}"}
