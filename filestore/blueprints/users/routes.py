from flask import current_app, jsonify, request
from flask_login import current_user, login_required

from . import bp
from ...extensions import db, rq
from ...jobs import JobKind
from ...services.users import register_user


@bp.post("")
def create_user():
    data = request.get_json(silent=True) or {}
    user = register_user(db.session, data.get("email"), data.get("password"))
    rq.jobs.enqueue(JobKind.WELCOME, {"userId": user.id})
    current_app.logger.info("user %s created", user.id)
    return jsonify(user.to_dict()), 201


@bp.get("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())
