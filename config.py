import os
from dotenv import load_dotenv
load_dotenv()


def _int_list(value):
    return [int(v) for v in value.split(",") if v.strip()]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///files_manager.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    FOLDER_PATH = os.getenv("FOLDER_PATH", "/tmp/files_manager")
    SESSION_TTL = int(os.getenv("SESSION_TTL", str(24 * 3600)))
    THUMBNAIL_WIDTHS = _int_list(os.getenv("THUMBNAIL_WIDTHS", "500,250,100"))
    JOB_MAX_ATTEMPTS = int(os.getenv("JOB_MAX_ATTEMPTS", "3"))
    JOB_BACKOFF = _int_list(os.getenv("JOB_BACKOFF", "5,30"))
    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
    MAIL_FROM = os.getenv("MAIL_FROM", "noreply@example.com")
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "Files Manager")
