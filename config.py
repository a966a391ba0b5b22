import os

from dotenv import find_dotenv, load_dotenv


def _load_env_files() -> None:
    """
    Load .env files with this precedence:
    1) Base .env (if present)
    2) Explicit file via ENV_FILE
    3) Environment-specific file from ENVIRONMENT (e.g. .env.production)
    Existing OS environment variables are never overridden.
    """
    base_path = find_dotenv(".env", usecwd=True)
    if base_path:
        load_dotenv(base_path, override=False)

    explicit = os.environ.get("ENV_FILE")
    if explicit:
        explicit_path = explicit if os.path.isabs(explicit) else find_dotenv(explicit, usecwd=True)
        if explicit_path:
            load_dotenv(explicit_path, override=False)
            return

    env_name = os.environ.get("ENVIRONMENT")
    if env_name:
        path = find_dotenv(f".env.{env_name.strip().lower()}", usecwd=True)
        if path:
            load_dotenv(path, override=False)


def _get_int_env(var_name: str, default_value: int) -> int:
    raw = os.environ.get(var_name, "").strip().rstrip(";")
    try:
        return int(raw)
    except ValueError:
        return default_value


def _get_list_env(var_name: str, default_value: list[str]) -> list[str]:
    raw = os.environ.get(var_name, "").strip()
    if not raw:
        return default_value
    return [item.strip() for item in raw.split(",") if item.strip()]


_load_env_files()

# === Environment ===
ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
APP_NAME = "Itinerary Planner API"
APP_VERSION = "1.0.0"

# === Database (managed Postgres; sqlite for local runs) ===
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./itinerary.db")

# === Supabase Auth ===
SUPABASE_URL = os.environ.get("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "")
SUPABASE_JWT_SECRET = os.environ.get("SUPABASE_JWT_SECRET", "change-me-in-production")
SUPABASE_JWT_AUDIENCE = os.environ.get("SUPABASE_JWT_AUDIENCE", "authenticated")
SUPABASE_JWT_ALGORITHM = "HS256"
AUTH_TIMEOUT_SECONDS = float(os.environ.get("AUTH_TIMEOUT_SECONDS", "10"))

# === Public URLs / CORS ===
PUBLIC_APP_URL = os.environ.get("PUBLIC_APP_URL", "").rstrip("/")
CORS_ORIGINS = _get_list_env("CORS_ORIGINS", ["*"])

# === Storage / logs ===
UPLOAD_DIR = os.environ.get("UPLOAD_DIR", "uploads")
LOG_DIR = os.environ.get("LOG_DIR", "logs")

# === Collaboration / sharing ===
SHARE_TOKEN_BYTES = _get_int_env("SHARE_TOKEN_BYTES", 32)
INVITATION_EXPIRY_DAYS = _get_int_env("INVITATION_EXPIRY_DAYS", 7)
ACCOUNT_DELETION_GRACE_DAYS = _get_int_env("ACCOUNT_DELETION_GRACE_DAYS", 30)

# === Currency rates ===
CURRENCY_API_BASE = os.environ.get("CURRENCY_API_BASE", "https://api.frankfurter.dev/v1")
CURRENCY_CACHE_SECONDS = _get_int_env("CURRENCY_CACHE_SECONDS", 3600)

# === Push notifications ===
FIREBASE_CREDENTIALS_PATH = os.environ.get("FIREBASE_CREDENTIALS_PATH", "serviceAccountKey.json")
