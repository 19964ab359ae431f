import pytest

from crisis_alert.db import schemas
from crisis_alert.services.auth_service import AuthenticationError, AuthService, UserExistsError
from crisis_alert.storage import MemStorage
from crisis_alert.utils.passwords import verify_password


@pytest.fixture
def mem():
    return MemStorage()


@pytest.fixture
def service(mem):
    return AuthService(storage=mem)


def test_login_existing_user(service):
    response = service.login(schemas.LoginRequest(email="Coordinator@Example.com", password="password", role="coordinator"))
    assert response.user.id == "2"
    assert response.dashboard == "/coordinator"
    assert response.created is False
    assert "password" not in response.user.model_dump()


def test_login_authority_alias(service):
    response = service.login(schemas.LoginRequest(email="coordinator@example.com", password="password", role="authority"))
    assert response.user.role == "coordinator"


def test_login_wrong_password(service):
    with pytest.raises(AuthenticationError):
        service.login(schemas.LoginRequest(email="citizen@example.com", password="not-it", role="citizen"))


def test_login_role_mismatch(service):
    with pytest.raises(PermissionError):
        service.login(schemas.LoginRequest(email="citizen@example.com", password="password", role="agency"))


@pytest.mark.parametrize("email,password", [("", "password"), ("a@b.c", ""), ("a@b.c", "abc")])
def test_login_rejects_bad_credentials(service, email, password):
    with pytest.raises(ValueError):
        service.login(schemas.LoginRequest(email=email, password=password))


def test_login_auto_registers_unknown_email(service, mem):
    response = service.login(schemas.LoginRequest(email="New.Person@Example.com", password="secret1", role="agency"))
    assert response.created is True
    assert response.dashboard == "/agency"
    assert response.user.email == "new.person@example.com"
    assert response.user.name == "new.person"

    stored = mem.get_user_by_email("new.person@example.com")
    assert stored.password != "secret1"
    assert verify_password("secret1", stored.password)

    again = service.login(schemas.LoginRequest(email="new.person@example.com", password="secret1", role="agency"))
    assert again.created is False
    assert again.user.id == response.user.id


def test_register_duplicate(service):
    with pytest.raises(UserExistsError):
        service.register(
            schemas.UserCreate(username="citizen1", email="fresh@example.com", name="Dup", password="secret1")
        )


def test_get_or_create_user(service, mem):
    existing = service.get_or_create_user("agency@example.com")
    assert existing.id == "3"

    created = service.get_or_create_user("walkin@example.com", name="Walk In")
    assert created.role == "citizen"
    assert created.name == "Walk In"
    assert service.get_or_create_user("walkin@example.com").id == created.id
    assert len(mem.get_users()) == 4
