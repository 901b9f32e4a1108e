"""Process every queued job in this process, then exit.

Handy in development when no RQ worker is running:
  python scripts/drain_jobs.py [--timeout SECONDS]

Limits compared with scripts/run_rq_worker.py:
- jobs are popped straight off the queue and are not recorded in RQ's
  StartedJobRegistry, so a job in flight when this process dies is lost;
- there is no scheduler here, so retries delayed by JOB_BACKOFF stay in the
  ScheduledJobRegistry until a worker started with the scheduler runs.
  Set JOB_BACKOFF to an empty value to have retries enqueued immediately.
"""

import argparse
import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from filestore import create_app
from filestore.extensions import rq


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument('--timeout', type=int, default=None,
                        help='block this many seconds waiting for the next job')
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        done = 0
        while True:
            job = rq.jobs.process_next(args.timeout)
            if job is None:
                break
            done += 1
            print(f'{job.kind.value} {job.id}: {job.state.value}' + (f' ({job.error})' if job.error else ''))
        print(f'processed {done} job(s)')


if __name__ == '__main__':
    main()
