import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DATA_DIR = os.getenv("DATA_DIR", "./data")
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "./uploads")

# Bounded wait for a collection lock before failing with storage_unavailable
LOCK_TIMEOUT_SECONDS = float(os.getenv("LOCK_TIMEOUT_SECONDS", "5"))
DASHBOARD_RECENT_LIMIT = int(os.getenv("DASHBOARD_RECENT_LIMIT", "5"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Seed EMP001 / admin@dayflow.com on the first start
SEED_ADMIN = bool(int(os.getenv("SEED_ADMIN", "1")))
