import base64
import itertools
from types import SimpleNamespace

import pytest
from flask import g
from redis.exceptions import ConnectionError as RedisConnectionError

from filestore import create_app
from filestore.extensions import db
from filestore.jobs.queue import QUEUE_NAMES
from filestore.models import User
from filestore.services import session_store


class FakeRedis:
    """Just enough of redis for sessions: SETEX/GET/DELETE/PING and a clock to move."""

    def __init__(self):
        self.data = {}
        self.now = 0
        self.down = False

    def _check(self):
        if self.down:
            raise RedisConnectionError("redis is down")

    def setex(self, name, time, value):
        self._check()
        self.data[name] = (str(value).encode(), self.now + int(time))
        return True

    def get(self, name):
        self._check()
        entry = self.data.get(name)
        if entry is None:
            return None
        value, expires_at = entry
        if self.now >= expires_at:
            del self.data[name]
            return None
        return value

    def delete(self, *names):
        self._check()
        return sum(1 for n in names if self.data.pop(n, None) is not None)

    def ping(self):
        self._check()
        return True

    def advance(self, seconds):
        self.now += seconds


class RecordingQueue:
    """Stands in for an rq.Queue; keeps what was enqueued instead of running it."""

    _ids = itertools.count(1)

    def __init__(self, name):
        self.name = name
        self.enqueued = []
        self.scheduled = []

    def _job(self, func, args, kwargs):
        return SimpleNamespace(id=f"{self.name}-{next(self._ids)}", func=func, args=args,
                               meta=dict(kwargs.get("meta") or {}), save_meta=lambda: None)

    def enqueue(self, func, *args, **kwargs):
        job = self._job(func, args, kwargs)
        self.enqueued.append(job)
        return job

    def enqueue_in(self, time_delta, func, *args, **kwargs):
        job = self._job(func, args, kwargs)
        self.scheduled.append((time_delta, job))
        return job


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def queues():
    return {kind: RecordingQueue(name) for kind, name in QUEUE_NAMES.items()}


@pytest.fixture
def blob_root(tmp_path):
    return tmp_path / "files_manager"


@pytest.fixture
def app(fake_redis, queues, blob_root):
    app = create_app({
        "TESTING": True,
        "PROPAGATE_EXCEPTIONS": False,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "REDIS_CLIENT": fake_redis,
        "JOB_QUEUES": queues,
        "JOB_MAX_ATTEMPTS": 3,
        "JOB_BACKOFF": [],
        "FOLDER_PATH": str(blob_root),
        "SENDGRID_API_KEY": None,
    })

    @app.before_request
    def forget_cached_user():
        # client requests share this fixture's app context, so flask-login's
        # per-context user cache has to be dropped for each request
        g.pop("_login_user", None)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(email, password="secret"):
    user = User(email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def user(app):
    return make_user("bob@example.com")


@pytest.fixture
def other_user(app):
    return make_user("eve@example.com")


@pytest.fixture
def auth_headers(user):
    return {"X-Token": session_store().create(user.id)}


def b64(raw: bytes) -> str:
    return base64.b64encode(raw).decode()
