import asyncio
from unittest.mock import MagicMock

import pytest

from eats.models.user import User, UserRole, Verification
from eats.services.auth import decode_access_token, verify_password
from eats.services.mail import MailService
from eats.services.users import UsersService


@pytest.fixture
def mail():
    return MagicMock(spec=MailService)


@pytest.fixture
def service(db, mail):
    return UsersService(db, mail)


def test_create_account_hashes_password_and_sends_code(db, service, mail):
    result = service.create_account("new@example.com", "pw12345", UserRole.Owner)
    assert result.ok

    user = db.query(User).filter(User.email == "new@example.com").one()
    assert user.role == UserRole.Owner
    assert user.password != "pw12345"
    assert verify_password("pw12345", user.password)
    assert not user.verified

    verification = db.query(Verification).filter(Verification.user_id == user.id).one()
    mail.send_verification_email.assert_called_once_with("new@example.com", verification.code)


def test_create_account_duplicate_email(service, make_user):
    make_user(email="taken@example.com")
    result = service.create_account("taken@example.com", "pw", UserRole.Client)
    assert result.error == "There is a user with that email already."


def test_login(service, make_user):
    user = make_user(email="me@example.com", password="right")

    ok = service.login("me@example.com", "right")
    assert ok.ok
    assert decode_access_token(ok.token) == user.id

    assert service.login("me@example.com", "wrong").error == "Wrong password."
    assert service.login("nobody@example.com", "right").error == "User not found"


def test_decode_rejects_garbage():
    assert decode_access_token("not-a-token") is None


def test_verify_email(db, service):
    service.create_account("v@example.com", "pw", UserRole.Client)
    code = db.query(Verification).one().code

    assert service.verify_email(code).ok
    assert db.query(User).filter(User.email == "v@example.com").one().verified
    assert db.query(Verification).count() == 0
    assert service.verify_email(code).error == "Verification failed"


def test_edit_profile_new_email_resets_verification(db, service, mail, make_user):
    user = make_user(email="old@example.com")
    user.verified = True
    db.commit()

    assert service.edit_profile(user.id, email="fresh@example.com").ok
    db.refresh(user)
    assert user.email == "fresh@example.com"
    assert not user.verified
    code = db.query(Verification).filter(Verification.user_id == user.id).one().code
    mail.send_verification_email.assert_called_once_with("fresh@example.com", code)


def test_edit_profile_password(db, service, mail, make_user):
    user = make_user(password="before")
    assert service.edit_profile(user.id, password="after").ok
    db.refresh(user)
    assert verify_password("after", user.password)
    mail.send_verification_email.assert_not_called()


def test_edit_profile_email_in_use(service, make_user):
    make_user(email="a@example.com")
    user = make_user(email="b@example.com")
    assert service.edit_profile(user.id, email="a@example.com").error == "Email is already in use"


def test_find_by_id(service, make_user):
    user = make_user()
    assert service.find_by_id(user.id).user.email == user.email
    assert service.find_by_id(999).error == "User not found"


def test_verification_email_links_frontend():
    message = MailService(frontend_url="http://front").build_verification_email("x@example.com", "abc")
    assert message["To"] == "x@example.com"
    assert "http://front/confirm?code=abc" in message.get_body(("plain",)).get_content()


def test_background_send_keeps_task_until_done():
    from eats.services import mail as mail_module

    async def scenario():
        service = MailService(host="", user="", password="")
        service.send_in_background(service.build_verification_email("y@example.com", "code"))
        assert len(mail_module._pending_sends) == 1
        for _ in range(10):
            if not mail_module._pending_sends:
                break
            await asyncio.sleep(0)
        assert not mail_module._pending_sends

    asyncio.run(scenario())
