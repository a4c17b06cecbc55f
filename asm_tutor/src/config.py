"""Configuration for the ASM Tutor chat service."""

import os
from dotenv import load_dotenv

# Load local env files if present (never commit these).
load_dotenv(dotenv_path=".env.local", override=False)
load_dotenv(dotenv_path=".env", override=False)

# Environment name (used for warnings/behavior toggles)
ENV = os.getenv("ENV", "development")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# OpenAI API key. Empty or unset means the chat replies locally with an error.
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

# Chat completion endpoint
OPENAI_API_URL = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1/chat/completions")

# Tutor model and sampling
TUTOR_MODEL = os.getenv("TUTOR_MODEL", "gpt-3.5-turbo")
TUTOR_TEMPERATURE = float(os.getenv("TUTOR_TEMPERATURE", "0.7"))

# HTTP client timeout for completion calls
OPENAI_TIMEOUT_SECONDS = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "60.0"))

CORS_ALLOW_ORIGINS = os.getenv("CORS_ALLOW_ORIGINS")


def _parse_csv_list(value: str | None) -> list[str] | None:
    if not value:
        return None
    items = [v.strip() for v in value.split(",")]
    items = [v for v in items if v]
    return items or None


def cors_allow_origins() -> list[str]:
    return _parse_csv_list(CORS_ALLOW_ORIGINS) or ["*"]
