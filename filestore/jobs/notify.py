from flask import current_app

from ..errors import JobError, PermanentJobError
from ..extensions import db
from ..services.mail import send_welcome
from ..services.users import find_user


def welcome_user(payload, lookup, send_mail=None):
    user_id = payload.get("userId")
    if not user_id:
        raise PermanentJobError("Missing userId")
    user = lookup(user_id)
    if user is None:
        raise PermanentJobError("User not found")

    current_app.logger.info("Welcome %s!", user.email)
    if send_mail is not None:
        try:
            send_mail(user.email)
        except Exception as e:
            raise JobError(f"Welcome mail to {user.email} failed: {e}") from e
    return user.email


def welcome_job(payload):
    # without an API key the log line is the whole notification
    send_mail = send_welcome if current_app.config.get("SENDGRID_API_KEY") else None
    return welcome_user(payload, lambda uid: find_user(db.session, uid), send_mail)
