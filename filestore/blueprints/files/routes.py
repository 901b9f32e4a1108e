import io
import mimetypes

from flask import current_app, jsonify, request, send_file
from flask_login import current_user, login_required

from . import bp
from ...errors import NotFoundError
from ...extensions import rq
from ...jobs import JobKind
from ...models import FileKind
from ...services import file_repository
from ...services.publication import publish, unpublish


@bp.post("")
@login_required
def upload():
    data = request.get_json(silent=True) or {}
    record = file_repository().create(
        current_user.id,
        name=data.get("name"),
        kind=data.get("type"),
        parent=data.get("parentId", 0),
        data=data.get("data"),
        is_public=data.get("isPublic", False),
    )
    # thumbnails are only generated for images
    if record.kind is FileKind.IMAGE:
        rq.jobs.enqueue(JobKind.THUMBNAIL, {"fileId": record.id, "userId": current_user.id})
    current_app.logger.info("user %s created %s %s", current_user.id, record.type, record.id)
    return jsonify(record.to_dict()), 201


@bp.get("/<file_id>")
@login_required
def show(file_id):
    record = file_repository().get_by_id(file_id, current_user.id)
    return jsonify(record.to_dict())


@bp.get("")
@login_required
def index():
    parent = request.args.get("parentId", "0")
    page = request.args.get("page", default=0, type=int)
    records = file_repository().list_children(current_user.id, parent, page)
    return jsonify([r.to_dict() for r in records])


@bp.put("/<file_id>/publish")
@login_required
def put_publish(file_id):
    return jsonify(publish(file_repository(), file_id, current_user.id).to_dict())


@bp.put("/<file_id>/unpublish")
@login_required
def put_unpublish(file_id):
    return jsonify(unpublish(file_repository(), file_id, current_user.id).to_dict())


@bp.get("/<file_id>/data")
@login_required
def data(file_id):
    size = request.args.get("size", type=int)
    if size is not None and size not in current_app.config.get("THUMBNAIL_WIDTHS", ()):
        raise NotFoundError()
    record, content = file_repository().read_data(file_id, current_user.id, size)
    mimetype = mimetypes.guess_type(record.name)[0] or "application/octet-stream"
    return send_file(io.BytesIO(content), mimetype=mimetype, download_name=record.name)
