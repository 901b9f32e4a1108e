import enum
from dataclasses import dataclass
from typing import Union

from ..errors import ValidationError, ValidationReason
from ..extensions import db
from .base import OwnerScopedMixin, TimestampMixin


class FileKind(str, enum.Enum):
    FOLDER = "folder"
    FILE = "file"
    IMAGE = "image"


class Root:
    """The account's virtual top-level folder. No record exists for it."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ROOT"


ROOT = Root()


@dataclass(frozen=True)
class FolderId:
    id: int


ParentRef = Union[Root, FolderId]

# wire values that stand for the root folder
_ROOT_WIRE_VALUES = (None, "", 0, "0")


def parse_parent(raw) -> ParentRef:
    """Turn a wire ``parentId`` into ``ROOT`` or a ``FolderId``.

    ``0`` (number or string) and absence mean the root; anything else must be
    an integer id, otherwise no folder can match it.
    """
    if isinstance(raw, (Root, FolderId)):
        return raw
    if isinstance(raw, bool):
        raise ValidationError(ValidationReason.PARENT_NOT_FOUND)
    if raw in _ROOT_WIRE_VALUES:
        return ROOT
    try:
        return FolderId(int(raw))
    except (TypeError, ValueError):
        raise ValidationError(ValidationReason.PARENT_NOT_FOUND) from None


class FileRecord(db.Model, OwnerScopedMixin, TimestampMixin):
    __tablename__ = "files"

    id = db.Column(db.Integer, primary_key=True)
    # OwnerScopedMixin: user_id
    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(20), nullable=False)  # folder/file/image, fixed at creation
    is_public = db.Column(db.Boolean, nullable=False, default=False)
    parent_id = db.Column(db.Integer, db.ForeignKey("files.id"), nullable=True, index=True)  # NULL = root
    local_path = db.Column(db.String(512), nullable=True)  # set iff type != folder

    @property
    def kind(self) -> FileKind:
        return FileKind(self.type)

    @property
    def parent(self) -> ParentRef:
        return ROOT if self.parent_id is None else FolderId(self.parent_id)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "type": self.type,
            "isPublic": self.is_public,
            "parentId": self.parent_id if self.parent_id is not None else 0,
        }
