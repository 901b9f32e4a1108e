"""Ownership-scoped access to the file/folder hierarchy.

Every query filters on ``(id, user_id)``: a record owned by someone else is
reported exactly like a record that does not exist.
"""

import base64
import binascii
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..errors import InternalError, NotFoundError, ValidationError, ValidationReason
from ..models import ROOT, FileKind, FileRecord, parse_parent
from .storage import BlobArea

PAGE_SIZE = 20


def _coerce_id(val) -> Optional[int]:
    if val is None or val == "" or isinstance(val, bool):
        return None
    try:
        return int(val)
    except (TypeError, ValueError):
        return None


_URLSAFE = str.maketrans("-_", "+/")
_TRUE_WORDS = ("true", "1")
_FALSE_WORDS = ("false", "0", "")


def _decode(data) -> bytes:
    """Decode base64 the lenient way: whitespace, missing padding and the url-safe alphabet are accepted."""
    if isinstance(data, bytes):
        data = data.decode("ascii", "replace")
    if not isinstance(data, str):
        raise ValidationError(ValidationReason.MISSING_DATA)
    cleaned = "".join(data.split()).translate(_URLSAFE)
    if not cleaned:
        raise ValidationError(ValidationReason.MISSING_DATA)
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        return base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError(ValidationReason.MISSING_DATA) from None


def _as_bool(value) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValidationError(ValidationReason.INVALID_IS_PUBLIC)


class FileRepository:
    def __init__(self, session, blobs: BlobArea):
        self.session = session
        self.blobs = blobs

    # writes

    def create(self, owner_id, name, kind, parent=ROOT, data=None, is_public=False) -> FileRecord:
        """Validate in wire order (name, type, data, parent) and dispatch on kind."""
        if not name:
            raise ValidationError(ValidationReason.MISSING_NAME)
        try:
            kind = FileKind(kind)
        except ValueError:
            raise ValidationError(ValidationReason.MISSING_TYPE) from None
        if kind is FileKind.FOLDER:
            return self.create_folder(owner_id, name, parent, is_public=is_public)
        return self.create_file(owner_id, name, kind, parent, data, is_public=is_public)

    def create_folder(self, owner_id, name, parent=ROOT, is_public=False) -> FileRecord:
        if not name:
            raise ValidationError(ValidationReason.MISSING_NAME)
        public = _as_bool(is_public)
        parent_id = self._resolve_parent(owner_id, parent)
        record = FileRecord(user_id=owner_id, name=name, type=FileKind.FOLDER.value,
                            is_public=public, parent_id=parent_id)
        return self._save(record)

    def create_file(self, owner_id, name, kind, parent=ROOT, data=None, is_public=False) -> FileRecord:
        if not name:
            raise ValidationError(ValidationReason.MISSING_NAME)
        try:
            kind = FileKind(kind)
        except ValueError:
            raise ValidationError(ValidationReason.MISSING_TYPE) from None
        if kind is FileKind.FOLDER:
            raise ValidationError(ValidationReason.MISSING_TYPE)
        if not data:
            raise ValidationError(ValidationReason.MISSING_DATA)
        public = _as_bool(is_public)
        parent_id = self._resolve_parent(owner_id, parent)
        raw = _decode(data)
        path = self.blobs.write(raw)
        record = FileRecord(user_id=owner_id, name=name, type=kind.value,
                            is_public=public, parent_id=parent_id, local_path=path)
        return self._save(record)

    def set_public(self, file_id, owner_id, value: bool) -> FileRecord:
        record = self.get_by_id(file_id, owner_id)
        record.is_public = _as_bool(value)
        return self._save(record)

    # reads

    def get_by_id(self, file_id, owner_id) -> FileRecord:
        record = self._find(file_id, owner_id)
        if record is None:
            raise NotFoundError()
        return record

    def read_data(self, file_id, owner_id, size: Optional[int] = None):
        """Return ``(record, bytes)`` for a file's blob, or its ``size`` px thumbnail.

        A blob missing on disk is reported as ``NotFoundError``, like a missing record.
        """
        record = self.get_by_id(file_id, owner_id)
        if record.kind is FileKind.FOLDER:
            raise ValidationError(ValidationReason.FOLDER_HAS_NO_CONTENT)
        path = record.local_path if size is None else self.blobs.derived_path(record.local_path, size)
        try:
            return record, self.blobs.read(path)
        except FileNotFoundError:
            raise NotFoundError() from None

    def list_children(self, owner_id, parent=ROOT, page: int = 0) -> List[FileRecord]:
        """One page (at most ``PAGE_SIZE``) of the owner's records under ``parent``, in creation order."""
        parent = parse_parent(parent)
        page = max(int(page or 0), 0)
        query = self.session.query(FileRecord).filter(FileRecord.user_id == owner_id)
        if parent is ROOT:
            query = query.filter(FileRecord.parent_id.is_(None))
        else:
            query = query.filter(FileRecord.parent_id == parent.id)
        try:
            return (query.order_by(FileRecord.id)
                    .offset(page * PAGE_SIZE)
                    .limit(PAGE_SIZE)
                    .all())
        except SQLAlchemyError as e:
            raise InternalError() from e

    # helpers

    def _find(self, file_id, owner_id) -> Optional[FileRecord]:
        file_id = _coerce_id(file_id)
        owner_id = _coerce_id(owner_id)
        if file_id is None or owner_id is None:
            return None
        try:
            return (self.session.query(FileRecord)
                    .filter_by(id=file_id, user_id=owner_id)
                    .first())
        except SQLAlchemyError as e:
            raise InternalError() from e

    def _resolve_parent(self, owner_id, parent) -> Optional[int]:
        parent = parse_parent(parent)
        if parent is ROOT:
            return None
        folder = self._find(parent.id, owner_id)
        if folder is None:
            raise ValidationError(ValidationReason.PARENT_NOT_FOUND)
        if folder.kind is not FileKind.FOLDER:
            raise ValidationError(ValidationReason.PARENT_NOT_FOLDER)
        return folder.id

    def _save(self, record: FileRecord) -> FileRecord:
        try:
            self.session.add(record)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise InternalError() from e
        return record
