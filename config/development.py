import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "clinic_db"),
}

# Clinic REST backend (patients, appointments, employees, time entries)
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000")
API_TIMEOUT_SECONDS = float(os.getenv("API_TIMEOUT_SECONDS", "10"))

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Purge expired archive entries shortly after startup
AUTO_PURGE_ON_START = bool(int(os.getenv("AUTO_PURGE_ON_START", "1")))
AUTO_PURGE_DELAY_SECONDS = float(os.getenv("AUTO_PURGE_DELAY_SECONDS", "0.5"))
