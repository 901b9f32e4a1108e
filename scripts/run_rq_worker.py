"""Run an RQ worker for the thumbnail and welcome queues inside the Flask app context.

Usage:
  source .venv/bin/activate
  export OBJC_DISABLE_INITIALIZE_FORK_SAFETY=YES   # macOS fork safety if needed
  python scripts/run_rq_worker.py

The scheduler is enabled because retries are enqueued with a delay.
"""

import sys
import os

# Ensure project root is on sys.path when running from scripts/ or other cwd
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from filestore import create_app
from filestore.extensions import rq
from rq import Worker


def main():
    app = create_app()
    with app.app_context():
        queues = list(rq.jobs.queues.values())
        worker = Worker(queues, connection=rq.redis)
        app.logger.info('RQ worker starting (pid %s) on %s', os.getpid(), [q.name for q in queues])
        try:
            worker.work(burst=False, with_scheduler=True, logging_level='INFO')
        finally:
            app.logger.info('RQ worker exiting (pid %s)', os.getpid())


if __name__ == '__main__':
    main()
