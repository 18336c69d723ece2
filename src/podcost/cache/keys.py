"""Canonical content hashing for cache keys."""

import hashlib
import json
from typing import Any


def normalize_text(text: str) -> str:
    return text.strip().lower()


def summary_hash(content: str) -> str:
    """SHA-256 of trimmed, lowercased content."""
    return hashlib.sha256(normalize_text(content).encode("utf-8")).hexdigest()


def audio_hash(fields: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON form of the synthesis fields.

    Keys are sorted and separators fixed so that the same field values
    always produce the same digest. Text is hashed exactly as it is
    synthesized and billed.

    Args:
        fields: Resolved request fields (text, voice, provider, format,
            quality, speed, pitch)

    Returns:
        64-character hex digest
    """
    payload = json.dumps(fields, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
