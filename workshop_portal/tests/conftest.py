import pytest

from workshop_portal.config import Settings
from workshop_portal.gateway.server import create_app
from workshop_portal.tests.fakes import MemoryUserStore, MemoryWorkshopStore

TEST_SECRET = "test_secret"


@pytest.fixture
def settings():
    return Settings(jwt_secret=TEST_SECRET)


@pytest.fixture
def user_store():
    return MemoryUserStore()


@pytest.fixture
def workshop_store():
    return MemoryWorkshopStore()


@pytest.fixture
def app(settings, user_store, workshop_store):
    app = create_app(settings, user_store=user_store, workshop_store=workshop_store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def signup(client):
    """
    Create a user through the API and return its bearer headers.
    """
    def _signup(username, password="pw1", **profile):
        response = client.post("/userApi/signup", json={"username": username, "password": password, **profile})
        assert response.status_code == 201
        response = client.post("/userApi/signin", json={"username": username, "password": password})
        return {"Authorization": f"Bearer {response.get_json()['token']}"}

    return _signup


@pytest.fixture
def admin(signup, user_store):
    """Bearer headers of a signed-up user promoted to admin."""
    headers = signup("root", "rootpw")
    user = user_store.find_by_username("root")
    user_store.update(user.id, {"is_admin": True})
    return headers
