import pytest

from filestore.errors import AuthError, ValidationError, ValidationReason
from filestore.extensions import db
from filestore.models import User
from filestore.services.users import authenticate, register_user


class StaleLookupSession:
    """Session whose existence checks miss, as when another request commits in between."""

    def __init__(self, session):
        self.session = session

    def query(self, *entities):
        return self

    def filter_by(self, **kwargs):
        return self

    def first(self):
        return None

    def __getattr__(self, name):
        return getattr(self.session, name)


def test_register_and_authenticate(app):
    user = register_user(db.session, "new@example.com", "pw")
    assert authenticate(db.session, "new@example.com", "pw").id == user.id
    with pytest.raises(AuthError):
        authenticate(db.session, "new@example.com", "nope")


def test_register_rejects_existing_email(app, user):
    with pytest.raises(ValidationError) as exc:
        register_user(db.session, user.email, "pw")
    assert exc.value.reason is ValidationReason.ALREADY_EXISTS


def test_duplicate_email_lost_race_is_already_exists(app, user):
    with pytest.raises(ValidationError) as exc:
        register_user(StaleLookupSession(db.session), user.email, "pw")
    assert exc.value.reason is ValidationReason.ALREADY_EXISTS
    assert User.query.filter_by(email=user.email).count() == 1
