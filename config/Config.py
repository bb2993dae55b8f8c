# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass
from dotenv import load_dotenv, find_dotenv

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=True)


@dataclass(frozen=True)
class Config:
    # OpenAI-compatible completion endpoint (OpenAI, Ollama /v1, vLLM ...)
    openai_base_url: str
    openai_api_key: str
    openai_chat_model: str

    # Chroma: "memory" keeps candidates in-process, "local" persists to
    # chroma_path, "cloud" uses Chroma Cloud credentials
    chroma_mode: str = "memory"
    chroma_path: str = ""
    chroma_api_key: str = ""
    chroma_tenant: str = ""
    chroma_database: str = ""

    # Optional JSON seed files
    users_seed_path: str = ""
    skills_path: str = ""

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        # OpenAI-compatible endpoint
        "openai_base_url": "OPENAI_BASE_URL",      # e.g. http://localhost:11434/v1
        "openai_api_key": "OPENAI_API_KEY",
        "openai_chat_model": "OPENAI_CHAT_MODEL",

        # Chroma
        "chroma_mode": "ADVISOR_CHROMA_MODE",
        "chroma_path": "ADVISOR_CHROMA_PATH",
        "chroma_api_key": "CHROMA_API_KEY",
        "chroma_tenant": "CHROMA_TENANT",
        "chroma_database": "CHROMA_DATABASE",

        # Seeds
        "users_seed_path": "ADVISOR_USERS_SEED",
        "skills_path": "ADVISOR_SKILLS_FILE",
    }

    REQUIRED_FIELDS = ("openai_base_url", "openai_api_key", "openai_chat_model")

    CHROMA_CLOUD_FIELDS = ("chroma_api_key", "chroma_tenant", "chroma_database")

    CHROMA_MODES = ("memory", "local", "cloud")

    OPENAI_ENV_VARS = (
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "OPENAI_CHAT_MODEL",
    )

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables."""
        kwargs = {}
        for field_name, env_name in Config.ENV_VARS.items():
            value = (os.getenv(env_name) or "").strip()
            if value:
                kwargs[field_name] = value
            elif field_name in Config.REQUIRED_FIELDS:
                kwargs[field_name] = ""
        return Config(**kwargs)

    def __post_init__(self):
        """
        Fail fast if any required config is missing or inconsistent.
        """
        missing_fields = [f for f in self.REQUIRED_FIELDS if not getattr(self, f)]

        if self.chroma_mode not in self.CHROMA_MODES:
            raise ValueError(
                f"{self.ENV_VARS['chroma_mode']} must be one of {self.CHROMA_MODES}, got {self.chroma_mode!r}"
            )
        if self.chroma_mode == "local" and not self.chroma_path:
            missing_fields.append("chroma_path")
        if self.chroma_mode == "cloud":
            missing_fields.extend(f for f in self.CHROMA_CLOUD_FIELDS if not getattr(self, f))

        if missing_fields:
            missing_env_vars = [self.ENV_VARS[f] for f in missing_fields]
            raise ValueError(f"Missing required environment variables: {missing_env_vars}")

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "openai_base_url": self.openai_base_url,
            "openai_chat_model": self.openai_chat_model,
            "chroma_mode": self.chroma_mode,
            "chroma_path": self.chroma_path or None,
            "chroma_tenant": self.chroma_tenant or None,
            "chroma_database": self.chroma_database or None,
            "users_seed_path": self.users_seed_path or None,
            "skills_path": self.skills_path or None,
        }
