from flask import jsonify
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from . import bp
from ...extensions import db, rq
from ...models import FileRecord, User


@bp.get("/status")
def status():
    try:
        redis_alive = bool(rq.redis.ping())
    except RedisError:
        redis_alive = False
    try:
        db.session.execute(text("SELECT 1"))
        db_alive = True
    except SQLAlchemyError:
        db_alive = False
    return jsonify(redis=redis_alive, db=db_alive)


@bp.get("/stats")
def stats():
    return jsonify(users=User.query.count(), files=FileRecord.query.count())
