import os
from uuid import uuid4


class BlobArea:
    """Flat directory holding primary blobs and their derived thumbnails.

    Each primary blob gets a fresh uuid name directly under the root, so
    concurrent writers never share a path. Thumbnails sit next to it as
    ``<blob>_<width>``.
    """

    def __init__(self, root):
        self.root = root

    def ensure_root(self):
        # exist_ok makes concurrent first use safe
        os.makedirs(self.root, exist_ok=True)
        return self.root

    def write(self, data: bytes) -> str:
        d = self.ensure_root()
        path = os.path.join(d, str(uuid4()))
        with open(path, "wb") as f:
            f.write(data)
        return path

    @staticmethod
    def derived_path(path: str, width: int) -> str:
        return f"{path}_{width}"

    def write_derived(self, path: str, width: int, data: bytes) -> str:
        target = self.derived_path(path, width)
        with open(target, "wb") as f:
            f.write(data)
        return target

    def read(self, path: str) -> bytes:
        with open(path, "rb") as f:
            return f.read()
