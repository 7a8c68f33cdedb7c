import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


def as_bool(value) -> bool:
    """YAML booleans pass through; quoted strings like "false" are parsed"""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./lms_users.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = as_bool(data.get("CORS_ALLOW_CREDENTIALS", True))
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Access tokens (HS512 JWT)
    # No default: the service refuses to start without a signing key
    JWT_SECRET = data.get("JWT_SECRET", "")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS512")
    ACCESS_TOKEN_EXPIRES_MINUTES = int(data.get("ACCESS_TOKEN_EXPIRES_MINUTES", 1440))

    # Refresh and password reset tokens
    REFRESH_TOKEN_EXPIRES_DAYS = int(data.get("REFRESH_TOKEN_EXPIRES_DAYS", 7))
    PASSWORD_RESET_EXPIRES_MINUTES = int(data.get("PASSWORD_RESET_EXPIRES_MINUTES", 60))
    PASSWORD_RESET_URL = data.get(
        "PASSWORD_RESET_URL", "http://localhost:3000/reset-password"
    )

    # Service-to-service calls (X-API-KEY header)
    INTERNAL_API_KEY = data.get("INTERNAL_API_KEY", "")

    # Outgoing email: "console" logs messages, "smtp" sends them
    NOTIFIER_BACKEND = data.get("NOTIFIER_BACKEND", "console")
    SMTP_HOST = data.get("SMTP_HOST", "localhost")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_USERNAME = data.get("SMTP_USERNAME", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_USE_TLS = as_bool(data.get("SMTP_USE_TLS", False))
    EMAIL_FROM = data.get("EMAIL_FROM", "no-reply@lms.local")
