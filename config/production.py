import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

MAX_REPORTED_ERRORS = int(os.getenv("MAX_REPORTED_ERRORS", "20"))

DEFAULT_ORGANIZATION_ID = int(os.getenv("DEFAULT_ORGANIZATION_ID", "1"))

SEED_DEMO_DATA = bool(int(os.getenv("SEED_DEMO_DATA", "0")))
