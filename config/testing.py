import os

from .config import *  # noqa: F401,F403

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
PROGRESS_FILE = os.getenv("PROGRESS_FILE", "logs/test-recalculation-progress.json")
