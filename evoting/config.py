import os
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent  # project root (where wsgi.py is)
load_dotenv(BASE_DIR / ".env")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///evoting.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-dev-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        minutes=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_MIN", "30"))
    )

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Election lifecycle
    ELECTION_STRICT_TRANSITIONS = _env_bool("ELECTION_STRICT_TRANSITIONS", "false")
    RESULTS_REPLACE_ON_PUBLISH = _env_bool("RESULTS_REPLACE_ON_PUBLISH", "true")
    PUBLISH_STATUS_GUARD = _env_bool("PUBLISH_STATUS_GUARD", "false")

    # Remote components (unset = in-process)
    ELECTION_SERVICE_URL = os.getenv("ELECTION_SERVICE_URL")
    VOTE_SERVICE_URL = os.getenv("VOTE_SERVICE_URL")
    RESULT_SERVICE_URL = os.getenv("RESULT_SERVICE_URL")
    SERVICE_TIMEOUT_SECONDS = float(os.getenv("SERVICE_TIMEOUT_SECONDS", "5"))
    SERVICE_AUTH_TOKEN = os.getenv("SERVICE_AUTH_TOKEN")

    SWAGGER = {"title": "E-Voting Core API", "uiversion": 3}


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "test-jwt-secret"
    ELECTION_SERVICE_URL = None
    VOTE_SERVICE_URL = None
    RESULT_SERVICE_URL = None
