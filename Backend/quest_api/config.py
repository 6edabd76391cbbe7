import os
from dotenv import load_dotenv

load_dotenv()

SQLALCHEMY_DATABASE_URL = os.getenv("SQLALCHEMY_DATABASE_URL", "sqlite:///./quest.db")
DB_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", "15000"))

APP_SECRET_KEY = os.getenv("APP_SECRET_KEY", "dev-insecure-change-me")
JWT_EXPIRES_IN_DAYS = int(os.getenv("JWT_EXPIRES_IN_DAYS", "7"))

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

REDIS_URL = os.getenv("REDIS_URL")

WEBHOOK_RATE_LIMIT_BACKEND = os.getenv("WEBHOOK_RATE_LIMIT_BACKEND", "memory")
WEBHOOK_RATE_LIMIT_MAX = int(os.getenv("WEBHOOK_RATE_LIMIT_MAX", "10"))
WEBHOOK_RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("WEBHOOK_RATE_LIMIT_WINDOW_SECONDS", "3600"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")

RECONCILE_SWEEP_HOUR_UTC = int(os.getenv("RECONCILE_SWEEP_HOUR_UTC", "3"))
