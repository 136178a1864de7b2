# pacer/core/config.py
import os
import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env
load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent.parent

# ---- VERSE CORPUS ----
VERSES_PATH = os.getenv("PACER_VERSES_PATH", "data/verses-kjv.json")
VERSES_URL = os.getenv("PACER_VERSES_URL")
CACHE_DIR = Path(os.getenv("PACER_CACHE_DIR", str(Path.home() / ".cache" / "pacer")))
DOWNLOAD_TIMEOUT = int(os.getenv("PACER_DOWNLOAD_TIMEOUT", "60"))  # seconds

# ---- SPEECH RULES ----
RULES_FILE = os.getenv(
    "PACER_RULES_FILE",
    str(PACKAGE_DIR / "config" / "speech_rules.yml"),
)

# ---- PARSING ----
# "Book 3 16" -> "Book 3:16" only makes sense for live speech
AGGRESSIVE_SPEECH = os.getenv("PACER_AGGRESSIVE_SPEECH", "true").lower() == "true"
DEBUG_PARSE = os.getenv("PACER_DEBUG_PARSE", "false").lower() == "true"

# ---- LOGGING ----
LOG_LEVEL = os.getenv("PACER_LOG_LEVEL", "INFO").upper()


def configure_logging(level: str = None) -> None:
    """Root logging setup for command-line entry points."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
