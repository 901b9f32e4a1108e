import pytest

from filestore.errors import NotFoundError
from filestore.services import file_repository
from filestore.services.publication import publish, unpublish


def test_publish_twice_then_unpublish(app, user):
    repo = file_repository()
    record = repo.create_folder(user.id, "F")

    assert publish(repo, record.id, user.id).is_public is True
    assert publish(repo, record.id, user.id).is_public is True
    assert unpublish(repo, record.id, user.id).is_public is False
    assert repo.get_by_id(record.id, user.id).is_public is False


def test_publish_not_found_propagates(app, user, other_user):
    repo = file_repository()
    record = repo.create_folder(user.id, "F")
    with pytest.raises(NotFoundError):
        publish(repo, record.id, other_user.id)
    with pytest.raises(NotFoundError):
        unpublish(repo, 12345, user.id)
