from flask import current_app, jsonify, request

from . import bp
from ...errors import AuthError
from ...extensions import db
from ...services import session_store
from ...services.users import authenticate


@bp.get("/connect")
def connect():
    # werkzeug decodes "Authorization: Basic base64(email:password)"
    creds = request.authorization
    if creds is None or creds.type != "basic":
        raise AuthError()
    user = authenticate(db.session, creds.username, creds.password)
    token = session_store().create(user.id)
    current_app.logger.info("session opened for user %s", user.id)
    return jsonify(token=token)


@bp.get("/disconnect")
def disconnect():
    token = request.headers.get("X-Token")
    sessions = session_store()
    if sessions.resolve(token) is None:
        raise AuthError()
    sessions.invalidate(token)
    return "", 204
