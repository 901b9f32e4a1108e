from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import AuthError, InternalError, ValidationError, ValidationReason
from ..models import User


def register_user(session, email, password) -> User:
    if not email:
        raise ValidationError(ValidationReason.MISSING_EMAIL)
    if not password:
        raise ValidationError(ValidationReason.MISSING_PASSWORD)
    if session.query(User).filter_by(email=email).first():
        raise ValidationError(ValidationReason.ALREADY_EXISTS)
    user = User(email=email)
    user.set_password(password)
    try:
        session.add(user)
        session.commit()
    except IntegrityError:
        # a concurrent registration took the email after the check above
        session.rollback()
        raise ValidationError(ValidationReason.ALREADY_EXISTS) from None
    except SQLAlchemyError as e:
        session.rollback()
        raise InternalError() from e
    return user


def authenticate(session, email, password) -> User:
    """Return the user for a correct email/password pair, else raise ``AuthError``."""
    if not email or not password:
        raise AuthError()
    user = session.query(User).filter_by(email=email).first()
    if user is None or not user.check_password(password):
        raise AuthError()
    return user


def find_user(session, user_id):
    try:
        return session.get(User, int(user_id))
    except (TypeError, ValueError):
        return None
