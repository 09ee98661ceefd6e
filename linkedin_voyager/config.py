"""
Settings read from the environment (and a ``.env`` file at the repo root).
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

# Session cookies copied from a logged-in browser
LINKEDIN_LI_AT: str = os.getenv("LINKEDIN_LI_AT", "")
LINKEDIN_JSESSIONID: str = os.getenv("LINKEDIN_JSESSIONID", "")

LINKEDIN_BASE_URL: str = os.getenv("LINKEDIN_BASE_URL", "https://www.linkedin.com").rstrip("/")

# Pacing
REQUEST_MIN_DELAY: float = float(os.getenv("LINKEDIN_REQUEST_MIN_DELAY", "2"))
REQUEST_MAX_DELAY: float = float(os.getenv("LINKEDIN_REQUEST_MAX_DELAY", "5"))
REQUESTS_PER_MINUTE: int = int(os.getenv("LINKEDIN_REQUESTS_PER_MINUTE", "20"))
REQUEST_TIMEOUT: float = float(os.getenv("LINKEDIN_REQUEST_TIMEOUT", "30"))

# Region assumed for phone numbers written without a country code (e.g. "GB")
DEFAULT_PHONE_REGION: Optional[str] = os.getenv("LINKEDIN_PHONE_REGION") or None

DEBUG: bool = os.getenv("LINKEDIN_DEBUG", "false").lower() in ("1", "true", "yes")
