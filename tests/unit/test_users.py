import pytest

from clinic_booking.errors import AuthenticationError, ConflictError, NotFoundError, NotificationError, ValidationError
from clinic_booking.services.users import UserService

NEW_USER = {"userId": "nurse1", "name": "Nurse", "department": "Ward", "email": "nurse@example.com", "role": "general"}


@pytest.fixture
def outbox():
    return []


@pytest.fixture
def users(seeded_users, outbox):
    return UserService(seeded_users, send=lambda to, subject, text, html: outbox.append((to, subject, text)))


def test_login_returns_token_and_hides_password(users):
    result = users.login("staff", "pw")
    assert result["token"] == "staff"
    assert result["mustChangePassword"] is False
    assert "password" not in result["user"]
    assert result["user"]["role"] == "general"


@pytest.mark.parametrize("user_id,password", [("staff", "nope"), ("ghost", "pw"), ("gone", "pw")])
def test_login_rejected(users, user_id, password):
    with pytest.raises(AuthenticationError):
        users.login(user_id, password)


def test_get_by_token_ignores_deleted_users(users):
    assert users.get_by_token("staff").name == "Staff"
    assert users.get_by_token("gone") is None


def test_create_sets_temporary_password_and_mails_it(users, outbox, seeded_users):
    created = users.create(NEW_USER)

    stored = seeded_users.read().users.get("nurse1")
    assert stored.must_change_password is True
    assert len(stored.password) == 8
    assert "password" not in created
    to, subject, text = outbox[0]
    assert to == ["nurse@example.com"]
    assert "account has been created" in subject
    assert stored.password in text


def test_create_requires_every_field(users):
    with pytest.raises(ValidationError):
        users.create({**NEW_USER, "department": ""})


def test_create_rejects_unknown_role(users):
    with pytest.raises(ValidationError):
        users.create({**NEW_USER, "role": "superuser"})


def test_duplicate_user_id(users):
    with pytest.raises(ConflictError):
        users.create({**NEW_USER, "userId": "staff"})


def test_create_survives_mail_failure(seeded_users):
    def broken(*args):
        raise NotificationError("smtp down")

    created = UserService(seeded_users, send=broken).create(NEW_USER)
    assert created["email_status"] == "failed"
    assert seeded_users.read().users.get("nurse1") is not None


def test_set_password_clears_flag(users, seeded_users):
    users.create(NEW_USER)
    users.set_password("nurse1", "secret")
    stored = seeded_users.read().users.get("nurse1")
    assert (stored.password, stored.must_change_password) == ("secret", False)
    with pytest.raises(ValidationError):
        users.set_password("nurse1", "")


def test_update_keeps_role_when_empty(users):
    updated = users.update("staff", {"name": "Staff Two", "role": "", "password": "hack"})
    assert updated["name"] == "Staff Two"
    assert updated["role"] == "general"
    assert users.login("staff", "pw")["user"]["name"] == "Staff Two"


def test_update_and_delete_unknown(users):
    with pytest.raises(NotFoundError):
        users.update("ghost", {"name": "x"})
    with pytest.raises(NotFoundError):
        users.delete("ghost", "Admin")


def test_delete_is_soft(users, seeded_users):
    users.delete("staff", "Admin")
    assert users.get_by_token("staff") is None
    assert seeded_users.read().users.get("staff").is_deleted is True
    assert "staff" not in [u["userId"] for u in users.list()]
