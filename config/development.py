import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "department_attendance"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Denominator of the attendance percentage (placeholder for lectures per term)
EXPECTED_TOTAL_LECTURES = int(os.getenv("EXPECTED_TOTAL_LECTURES", "60"))
# 1 = a student may mark the same lecture more than once
ALLOW_DUPLICATE_ATTENDANCE = bool(int(os.getenv("ALLOW_DUPLICATE_ATTENDANCE", "1")))
REGISTER_REDIRECT_SECONDS = int(os.getenv("REGISTER_REDIRECT_SECONDS", "2"))
