import os

# Server
HOST = os.getenv("TASKBOARD_HOST", "0.0.0.0")
PORT = int(os.getenv("TASKBOARD_PORT", "8080"))
DB_PATH = os.getenv("TASKBOARD_DB_PATH", "tasks.db")
LOG_LEVEL = os.getenv("TASKBOARD_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("TASKBOARD_CORS_ORIGINS", "").split(",") if o.strip()]

# Auth
JWT_SECRET = os.getenv("TASKBOARD_JWT_SECRET", "my_secret_key")
JWT_ALGORITHM = "HS256"
TOKEN_TTL_MINUTES = int(os.getenv("TASKBOARD_TOKEN_TTL_MINUTES", "5"))
TOKEN_COOKIE_NAME = "token"

# Live updates
EVENTS_KEEPALIVE_SECONDS = float(os.getenv("TASKBOARD_EVENTS_KEEPALIVE_SECONDS", "15"))

# Client
CLIENT_BASE_URL = os.getenv("TASKBOARD_URL", "http://localhost:8080")
CLIENT_TIMEOUT = float(os.getenv("TASKBOARD_CLIENT_TIMEOUT", "30"))
CLIENT_RETRY_SECONDS = float(os.getenv("TASKBOARD_CLIENT_RETRY_SECONDS", "3"))
