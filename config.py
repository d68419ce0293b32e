# config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _get_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"La variable {key} debe ser booleana (true/false)")


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"La variable {key} debe ser un entero") from exc


# --- PERSISTENCIA ---
# 'sql' usa SQLAlchemy contra DATABASE_URL; 'rest' usa la API REST del backend-as-a-service
PERSISTENCE_BACKEND = os.getenv("PERSISTENCE_BACKEND", "sql").strip().lower()
if PERSISTENCE_BACKEND not in {"sql", "rest"}:
    raise ValueError("PERSISTENCE_BACKEND debe ser 'sql' o 'rest'")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./payables.db")

BAAS_URL = os.getenv("BAAS_URL", "")
BAAS_SERVICE_KEY = os.getenv("BAAS_SERVICE_KEY", "")
BAAS_TIMEOUT_SECONDS = _get_int("BAAS_TIMEOUT_SECONDS", 30)

# --- INGESTA DE NFe ---
# 'processing': hoy + N días (comportamiento histórico); 'issue': fecha de emisión + N días
DUE_DATE_POLICY = os.getenv("DUE_DATE_POLICY", "processing").strip().lower()
if DUE_DATE_POLICY not in {"processing", "issue"}:
    raise ValueError("DUE_DATE_POLICY debe ser 'processing' o 'issue'")

DUE_DATE_OFFSET_DAYS = _get_int("DUE_DATE_OFFSET_DAYS", 30)
ENFORCE_UNIQUE_ACCESS_KEY = _get_bool("ENFORCE_UNIQUE_ACCESS_KEY", False)

# --- CELERY ---
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")

# --- API ---
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",") if o.strip()]
