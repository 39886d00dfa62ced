import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "construction_hr_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_ADMIN = False
ADMIN_PASSWORD = "admin123"

JWT_SECRET = "test-jwt-secret"
JWT_EXPIRES_HOURS = 24

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads-test")
MAX_UPLOAD_MB = 5

EMAIL_BACKEND = "console"
EMAIL_HOST = "localhost"
EMAIL_PORT = 587
EMAIL_USER = ""
EMAIL_PASSWORD = ""
EMAIL_FROM = "hr@example.com"
EMAIL_USE_TLS = False

COMPANY_NAME = "Sadhna Construction"

CORS_ALLOWED_ORIGINS = "*"
