# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: settings.py
# -----------------------------------------------------------------------------
import os
from pathlib import Path
from typing import Any, Dict


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(name: str, default: float) -> float:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a float, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


# -----------------------------------------------------------------------------
# Seed data (overridden by ADVISOR_USERS_SEED / ADVISOR_SKILLS_FILE in Config)
# -----------------------------------------------------------------------------
DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_USERS_SEED = DATA_DIR / "users.json"
DEFAULT_SKILLS_FILE = DATA_DIR / "skills.json"


# -----------------------------------------------------------------------------
# Retrieval
# -----------------------------------------------------------------------------
SIMILAR_USERS_LIMIT = _env_int("ADVISOR_SIMILAR_USERS_LIMIT", 10)
SIMILAR_DOCUMENTS_LIMIT = _env_int("ADVISOR_SIMILAR_DOCUMENTS_LIMIT", 5)

# Collection names (Chroma) for the two candidate spaces and the skill cache
USER_COLLECTION = _env("ADVISOR_USER_COLLECTION", "user_embedding")
DOCUMENT_COLLECTION = _env("ADVISOR_DOCUMENT_COLLECTION", "document_embedding")
SKILL_CACHE_COLLECTION = _env("ADVISOR_SKILL_CACHE_COLLECTION", "skill_embedding")


# -----------------------------------------------------------------------------
# Encoding
# -----------------------------------------------------------------------------
# "static" uses the skill taxonomy table, "llm" asks the completion endpoint
SKILL_ENCODER = _env("ADVISOR_SKILL_ENCODER", "static").lower()

# "sum" (L1) or "l2" (unit magnitude)
NORMALIZE_MODE = _env("ADVISOR_NORMALIZE_MODE", "sum").lower()

if SKILL_ENCODER not in ("static", "llm"):
    raise RuntimeError(f"ADVISOR_SKILL_ENCODER must be 'static' or 'llm', got {SKILL_ENCODER!r}")

if NORMALIZE_MODE not in ("sum", "l2"):
    raise RuntimeError(f"ADVISOR_NORMALIZE_MODE must be 'sum' or 'l2', got {NORMALIZE_MODE!r}")

# Warm the skill cache from the skills file on startup
WARM_UP_SKILLS = _env_bool("ADVISOR_WARM_UP_SKILLS", False)


# -----------------------------------------------------------------------------
# Conversation retention
# -----------------------------------------------------------------------------
MAX_SESSIONS = _env_int("ADVISOR_MAX_SESSIONS", 1000)
MAX_TURNS_PER_SESSION = _env_int("ADVISOR_MAX_TURNS_PER_SESSION", 50)

if MAX_SESSIONS < 1 or MAX_TURNS_PER_SESSION < 2:
    raise RuntimeError("ADVISOR_MAX_SESSIONS must be >= 1 and ADVISOR_MAX_TURNS_PER_SESSION >= 2")


# -----------------------------------------------------------------------------
# Prompt / completion defaults
# -----------------------------------------------------------------------------
PERSONA_NAME = _env("ADVISOR_PERSONA_NAME", "VENKAT")
MAX_CONTEXT_CHARS = _env_int("ADVISOR_MAX_CONTEXT_CHARS", 12000)
# share of MAX_CONTEXT_CHARS reserved for document summaries; the transcript gets the rest
DOCUMENT_CONTEXT_SHARE = _env_float("ADVISOR_DOCUMENT_CONTEXT_SHARE", 0.5)

if not 0.0 <= DOCUMENT_CONTEXT_SHARE <= 1.0:
    raise RuntimeError("ADVISOR_DOCUMENT_CONTEXT_SHARE must be between 0 and 1")

CHAT_DEFAULTS: Dict[str, Any] = {
    "temperature": _env_float("ADVISOR_DEFAULT_TEMPERATURE", 0.7),
    "max_tokens": _env_int("ADVISOR_DEFAULT_MAX_TOKENS", 700),
}

ENCODER_DEFAULTS: Dict[str, Any] = {
    "temperature": _env_float("ADVISOR_ENCODER_TEMPERATURE", 0.0),
    "max_tokens": _env_int("ADVISOR_ENCODER_MAX_TOKENS", 32),
}


# -----------------------------------------------------------------------------
# Streaming
# -----------------------------------------------------------------------------
# Bounded channel between the delta producer thread and the HTTP consumer
STREAM_QUEUE_SIZE = _env_int("ADVISOR_STREAM_QUEUE_SIZE", 64)
STREAM_PUT_TIMEOUT_SEC = _env_float("ADVISOR_STREAM_PUT_TIMEOUT_SEC", 30.0)


# -----------------------------------------------------------------------------
# UI
# -----------------------------------------------------------------------------
MOUNT_UI = _env_bool("ADVISOR_MOUNT_UI", True)
