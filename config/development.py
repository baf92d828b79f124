import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Bulk imports report at most this many error messages
MAX_REPORTED_ERRORS = int(os.getenv("MAX_REPORTED_ERRORS", "20"))

DEFAULT_ORGANIZATION_ID = int(os.getenv("DEFAULT_ORGANIZATION_ID", "1"))

# Load demo employees and national holidays on startup
SEED_DEMO_DATA = bool(int(os.getenv("SEED_DEMO_DATA", "1")))
