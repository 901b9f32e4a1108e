from .queue import Job, JobKind, JobQueue, JobState, perform

__all__ = ["Job", "JobKind", "JobQueue", "JobState", "perform"]
