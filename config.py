import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get("CHATWEET_CONFIG", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./chatweet.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", ["*"])
    CORS_ALLOW_HEADERS = data.get(
        "CORS_ALLOW_HEADERS", ["authorization", "x-client-info", "apikey", "content-type"]
    )
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    SERVICE_API_KEY = data.get("SERVICE_API_KEY", "")

    # Session authority
    SESSION_TTL_HOURS = int(data.get("SESSION_TTL_HOURS", 24))
    STORE_TIMEOUT_SECONDS = float(data.get("STORE_TIMEOUT_SECONDS", 5))
    CREATE_SESSION_MAX_ATTEMPTS = int(data.get("CREATE_SESSION_MAX_ATTEMPTS", 3))
    AUDIT_EMPTY_FORCED_LOGOUT = bool(data.get("AUDIT_EMPTY_FORCED_LOGOUT", False))
    CLEANUP_INTERVAL_SECONDS = float(data.get("CLEANUP_INTERVAL_SECONDS", 0))
    CREATE_TABLES_ON_STARTUP = bool(data.get("CREATE_TABLES_ON_STARTUP", True))
    HISTORY_PAGE_LIMIT = int(data.get("HISTORY_PAGE_LIMIT", 50))

    # Client session agent
    SESSION_SERVICE_URL = data.get("SESSION_SERVICE_URL", "http://localhost:8000/api")
    CLIENT_STORAGE_PATH = os.path.expanduser(
        data.get("CLIENT_STORAGE_PATH", "~/.chatweet/storage.json")
    )
    CLIENT_TIMEOUT_SECONDS = float(data.get("CLIENT_TIMEOUT_SECONDS", 5))
