import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Server settings read from the environment, with defaults for local runs."""

    DATABASE_FILE = os.environ.get("CHATDB_DATABASE_FILE", os.path.join("public", "database.json"))
    HOST = os.environ.get("CHATDB_HOST", "0.0.0.0")
    PORT = int(os.environ.get("CHATDB_PORT", 3000))
    MAX_CONTENT_LENGTH = int(os.environ.get("CHATDB_MAX_CONTENT_LENGTH", 50 * 1024 * 1024))
    DEBUG = _env_flag("FLASK_DEBUG")

    # --- Logging ---
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    @classmethod
    def to_flask_dict(cls):
        return {
            "DATABASE_FILE": cls.DATABASE_FILE,
            "MAX_CONTENT_LENGTH": cls.MAX_CONTENT_LENGTH,
            "DEBUG": cls.DEBUG,
        }
