from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from redis import Redis

from .jobs.queue import JobQueue


class RQWrapper:
    """Owns the shared redis connection and the job queue built on it.

    Tests hand in doubles through the ``REDIS_CLIENT`` and ``JOB_QUEUES``
    config keys instead of a live server.
    """

    def __init__(self):
        self.redis = None
        self.jobs = None

    def init_app(self, app):
        self.redis = app.config.get("REDIS_CLIENT") or Redis.from_url(app.config.get("REDIS_URL"))
        options = {
            "max_attempts": app.config.get("JOB_MAX_ATTEMPTS", 3),
            "backoff": app.config.get("JOB_BACKOFF") or (),
        }
        queues = app.config.get("JOB_QUEUES")
        if queues is not None:
            self.jobs = JobQueue(queues, **options)
        else:
            self.jobs = JobQueue.from_connection(self.redis, **options)
        app.extensions["rq"] = self


db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
rq = RQWrapper()
