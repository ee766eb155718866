"""Filesystem locations used by the application."""

import os
from pathlib import Path

BASE_DIR = Path(__file__).parent.parent

DATA_DIR = Path(os.environ.get("INCOME_STREAM_DATA_DIR", BASE_DIR / "data"))

WEB_DIR = BASE_DIR / "web" / "dist"
