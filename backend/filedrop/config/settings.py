import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"`{name}` must be an integer, got {raw!r}") from e


# HTTP listener, always bound to the loopback interface
HOST = "127.0.0.1"
PORT = _int_env("PORT", "3000")

# -------------------------
# Database
# -------------------------
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./filedrop.db")
DB_BUSY_TIMEOUT_SECONDS = _int_env("DB_BUSY_TIMEOUT_SECONDS", "15")

# -------------------------
# Uploads
# -------------------------
# Megabytes here are decimal: 1 MB == 1_000_000 bytes
MAX_UPLOAD_SIZE_MB = _int_env("MAX_UPLOAD_SIZE_MB", "100")
if MAX_UPLOAD_SIZE_MB < 0:
    raise ValueError("MAX_UPLOAD_SIZE_MB must not be negative")


def max_upload_size(size_mb: int = MAX_UPLOAD_SIZE_MB) -> int:
    """Upload ceiling in bytes for the whole request body."""
    return 1000 * 1000 * size_mb


# -------------------------
# Web assets
# -------------------------
ASSETS_DIR = os.getenv("ASSETS_DIR", "assets")
TEMPLATES_DIR = os.getenv("TEMPLATES_DIR", str(Path(__file__).resolve().parent.parent / "templates"))
