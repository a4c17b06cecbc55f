from __future__ import annotations

import re


_RE_BEARER = re.compile(r"(?i)\bBearer\s+([A-Za-z0-9._\-+/=]{8,})")
_RE_OPENAI_PROJECT_SK = re.compile(r"\bsk-proj-[A-Za-z0-9_\-]{10,}")
_RE_OPENAI_SK = re.compile(r"\bsk-[A-Za-z0-9_\-]{10,}")


def redact_secrets(text: str, *extra: str | None) -> str:
    """
    Best-effort secret redaction for log lines and error text shown in chat.

    `extra` holds literal secrets (e.g. the configured API key) that are
    replaced wherever they appear, whatever their shape.
    """
    if not text:
        return text

    out = text
    for secret in extra:
        if secret:
            out = out.replace(secret, "[REDACTED]")
    out = _RE_BEARER.sub("Bearer [REDACTED]", out)
    out = _RE_OPENAI_PROJECT_SK.sub("[REDACTED]", out)
    out = _RE_OPENAI_SK.sub("[REDACTED]", out)
    return out
