import os

from .config import *  # noqa: F401,F403

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
LOG_JSON = bool(int(os.getenv("LOG_JSON", "1")))
