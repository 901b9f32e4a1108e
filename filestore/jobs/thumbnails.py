from typing import Callable, Iterable, List

from flask import current_app

from ..errors import JobError, NotFoundError, PermanentJobError
from ..models import FileKind
from ..services import blob_area, file_repository
from ..services.files import FileRepository
from ..services.imaging import render_thumbnail
from ..services.storage import BlobArea

THUMBNAIL_WIDTHS = (500, 250, 100)


def generate_thumbnails(payload, repository: FileRepository, blobs: BlobArea,
                        widths: Iterable[int] = THUMBNAIL_WIDTHS,
                        render: Callable[[str, int], bytes] = render_thumbnail) -> List[str]:
    """Write ``<blob>_<width>`` for each width, largest first.

    Widths run one after another. The first failure stops the loop: smaller
    widths are not attempted and the ones already written stay on disk. A
    retry starts again from the largest width.
    """
    file_id = payload.get("fileId")
    user_id = payload.get("userId")
    if not file_id:
        raise PermanentJobError("Missing fileId")
    if not user_id:
        raise PermanentJobError("Missing userId")

    try:
        record = repository.get_by_id(file_id, user_id)
    except NotFoundError:
        raise PermanentJobError("File not found") from None
    if record.kind is not FileKind.IMAGE:
        raise PermanentJobError(f"File {file_id} is not an image")

    written = []
    for width in sorted(widths, reverse=True):
        try:
            data = render(record.local_path, width)
            written.append(blobs.write_derived(record.local_path, width, data))
        except (OSError, ValueError) as e:
            raise JobError(f"Error generating thumbnail ({width}px) for file {file_id}: {e}") from e
    return written


def thumbnail_job(payload):
    widths = current_app.config.get("THUMBNAIL_WIDTHS") or THUMBNAIL_WIDTHS
    written = generate_thumbnails(payload, file_repository(), blob_area(), widths)
    current_app.logger.info("thumbnails for file %s: %s", payload.get("fileId"), written)
    return written
