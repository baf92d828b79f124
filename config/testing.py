import os

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

MAX_REPORTED_ERRORS = 20

DEFAULT_ORGANIZATION_ID = 1

SEED_DEMO_DATA = False
