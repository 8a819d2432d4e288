import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


DEFAULT_RATE_LIMITS = {
    "login": {"max_attempts": 5, "window_seconds": 15 * 60},
    "login_ip": {"max_attempts": 20, "window_seconds": 15 * 60},
    "register": {"max_attempts": 5, "window_seconds": 60 * 60},
    "change_password": {"max_attempts": 5, "window_seconds": 15 * 60},
}


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./lotus_auth.db")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    CACHE_BACKEND = data.get("CACHE_BACKEND", "sql")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # Token lifecycle
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_REFRESH_SECRET = data.get(
        "JWT_REFRESH_SECRET", "dev-refresh-secret-key-change-in-production"
    )
    JWT_ISSUER = data.get("JWT_ISSUER", "lotus-app")
    JWT_AUDIENCE = data.get("JWT_AUDIENCE", "lotus-api")
    TOKEN_VERSION = int(data.get("TOKEN_VERSION", 1))
    ACCESS_TOKEN_TTL_SECONDS = int(data.get("ACCESS_TOKEN_TTL_SECONDS", 15 * 60))
    REFRESH_TOKEN_TTL_SECONDS = int(
        data.get("REFRESH_TOKEN_TTL_SECONDS", 7 * 24 * 60 * 60)
    )
    ACCESS_TOKEN_STATELESS = bool(data.get("ACCESS_TOKEN_STATELESS", False))
    REPLAY_REVOKE_SCOPE = data.get("REPLAY_REVOKE_SCOPE", "user")
    SESSION_RETENTION_DAYS = int(data.get("SESSION_RETENTION_DAYS", 30))

    # Credentials
    HASH_COST_FACTOR = int(data.get("HASH_COST_FACTOR", 12))
    RATE_LIMITS = {**DEFAULT_RATE_LIMITS, **data.get("RATE_LIMITS", {})}
