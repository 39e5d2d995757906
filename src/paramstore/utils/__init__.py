"""Utility functions and helpers."""

from __future__ import annotations

from paramstore.utils.logging import (
    JSONFormatter,
    LogSanitizer,
    SanitizingFormatter,
    sanitize_text,
)

__all__ = [
    "JSONFormatter",
    "LogSanitizer",
    "SanitizingFormatter",
    "sanitize_text",
]
