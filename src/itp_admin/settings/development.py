import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "itp_admin"),
}

# Root folder holding one sub-folder per bucket (player-documents, prospect-onboarding)
STORAGE_ROOT = os.getenv("STORAGE_ROOT", "var/storage")
SIGNED_URL_MAX_AGE = int(os.getenv("SIGNED_URL_MAX_AGE", "3600"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed houses/rooms/grocery catalogue and demo staff logins
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
