"""Per-request construction of the services over the app's shared clients."""

from flask import current_app

from ..extensions import db, rq
from .files import FileRepository
from .sessions import SessionStore
from .storage import BlobArea


def session_store() -> SessionStore:
    return SessionStore(rq.redis, ttl=current_app.config.get("SESSION_TTL", 24 * 3600))


def blob_area() -> BlobArea:
    return BlobArea(current_app.config["FOLDER_PATH"])


def file_repository() -> FileRepository:
    return FileRepository(db.session, blob_area())
