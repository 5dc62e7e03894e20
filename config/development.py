import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "punch_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Organizational timezone used to render punch dates/times.
TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")

# "mysql" or "memory" (single process, history lost on restart)
PUNCH_STORE = os.getenv("PUNCH_STORE", "mysql")
PUNCH_MAX_RETRIES = int(os.getenv("PUNCH_MAX_RETRIES", "3"))
PUNCH_RETRY_BACKOFF = float(os.getenv("PUNCH_RETRY_BACKOFF", "0.05"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
