"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    GITHUB_API_URL        — REST API base (default: https://api.github.com)
    HTTP_TIMEOUT          — Seconds per outbound request (default: 20)
    PAGE_SIZE             — Runs requested per listing page (default: 100)
    MAX_PARALLEL_CANCELS  — Cancel requests allowed in flight (default: 1)
    DRY_RUN               — Log targets without cancelling (default: false)
    LOG_LEVEL             — Root log level (default: INFO)
    LOG_DIR               — Directory for a persistent log file (default: unset)

The run identity itself (GITHUB_RUN_ID, GITHUB_REPOSITORY, ...) is not read
here; see cancel_duplicates.core.environment.
"""
import os
from dotenv import load_dotenv

load_dotenv()

GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", 20.0))
PAGE_SIZE = int(os.getenv("PAGE_SIZE", 100))
MAX_PARALLEL_CANCELS = int(os.getenv("MAX_PARALLEL_CANCELS", 1))
DRY_RUN = os.getenv("DRY_RUN", "false").lower() in ("1", "true", "yes")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR") or None

USER_AGENT = "cancel-duplicates"
GITHUB_API_VERSION = "2022-11-28"
