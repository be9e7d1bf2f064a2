import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "department_attendance"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

EXPECTED_TOTAL_LECTURES = int(os.getenv("EXPECTED_TOTAL_LECTURES", "60"))
ALLOW_DUPLICATE_ATTENDANCE = bool(int(os.getenv("ALLOW_DUPLICATE_ATTENDANCE", "1")))
REGISTER_REDIRECT_SECONDS = int(os.getenv("REGISTER_REDIRECT_SECONDS", "2"))
