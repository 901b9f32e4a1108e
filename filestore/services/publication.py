from ..models import FileRecord
from .files import FileRepository


def publish(repository: FileRepository, file_id, owner_id) -> FileRecord:
    return repository.set_public(file_id, owner_id, True)


def unpublish(repository: FileRepository, file_id, owner_id) -> FileRecord:
    return repository.set_public(file_id, owner_id, False)
