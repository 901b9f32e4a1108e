from .user import User
from .file import FileRecord, FileKind, ROOT, FolderId, parse_parent

__all__ = ["User", "FileRecord", "FileKind", "ROOT", "FolderId", "parse_parent"]
