# shopapi/config.py
import os
import logging
from contextvars import ContextVar
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

# Correlation id of the request being processed, "-" outside of requests
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Configuration settings for the API"""

    # Auth settings
    JWT_HMAC_KEY: str = os.getenv("JWT_HMAC_KEY")
    if not JWT_HMAC_KEY:
        raise ValueError("No JWT_HMAC_KEY set in environment")

    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL")
    if not DATABASE_URL:
        raise ValueError("No DATABASE_URL set in environment")

    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
    DB_ECHO: bool = _env_flag("DB_ECHO")

    # HTTP settings
    API_PREFIX: str = os.getenv("API_PREFIX", "/api/v1")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))

    # When true, filtering products by a category that does not exist
    # yields no products instead of ignoring the category filter
    CATEGORY_FILTER_STRICT: bool = _env_flag("CATEGORY_FILTER_STRICT")

    # Other settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Paths
    LOG_DIR = Path(os.getenv("LOG_DIR", BASE_DIR / "logs"))

    # Ensure directories exist
    LOG_DIR.mkdir(exist_ok=True)


class RequestIdFilter(logging.Filter):
    """Stamps every record with the current request id"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


def setup_logging():
    """Configure logging settings"""
    log_format = '%(asctime)s - [requestId=%(request_id)s] - %(name)s - %(levelname)s - %(message)s'
    log_file = Config.LOG_DIR / "shopapi.log"

    handlers = [
        logging.FileHandler(log_file),
        logging.StreamHandler()
    ]
    for handler in handlers:
        handler.addFilter(RequestIdFilter())

    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL),
        format=log_format,
        handlers=handlers
    )
