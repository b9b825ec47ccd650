import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "clinic_db_test"),
}

API_BASE_URL = "http://clinic-api.test"
API_TIMEOUT_SECONDS = 1.0

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_PURGE_ON_START = False
AUTO_PURGE_DELAY_SECONDS = 0.0
