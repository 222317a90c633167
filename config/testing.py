import os

SECRET_KEY = "test-secret"

DATA_DIR = os.getenv("DATA_DIR", "./.test-data")
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "./.test-uploads")

LOCK_TIMEOUT_SECONDS = 2.0
DASHBOARD_RECENT_LIMIT = 5

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

SEED_ADMIN = True
