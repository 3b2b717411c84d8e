import os
from dotenv import load_dotenv

load_dotenv()

IS_HF = os.environ.get("SPACE_ID") is not None

LLM_API_URL = os.getenv("LLM_API_URL", "https://api.openai.com/v1/chat/completions")
MODEL_NAME = os.getenv("MODEL_NAME", "gpt-3.5-turbo")


def llm_api_key() -> str:
    """API key for the text-generation endpoint; read on every call so tests can patch the env."""
    return os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY") or ""


def llm_timeout() -> float:
    try:
        return float(os.getenv("LLM_TIMEOUT", "60"))
    except ValueError:
        return 60.0


def base_dir() -> str:
    return os.getenv("BASE_DIR", "/tmp/data" if IS_HF else "data")


def database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    return f"sqlite:///{os.path.join(base_dir(), 'app.db')}"


def session_ttl() -> float:
    """Seconds an idle quiz session is kept in memory."""
    try:
        return float(os.getenv("SESSION_TTL", "3600"))
    except ValueError:
        return 3600.0


def max_sessions() -> int:
    try:
        return int(os.getenv("MAX_SESSIONS", "500"))
    except ValueError:
        return 500


def cors_origins() -> list:
    """Comma-separated CORS_ORIGINS; all origins when unset."""
    raw = os.getenv("CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]
