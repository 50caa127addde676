"""Utility helpers."""

from .gemini import GeminiService, extract_json, grounding_sources
from .logger import JsonFormatter, configure_logging

__all__ = [
    "GeminiService",
    "extract_json",
    "grounding_sources",
    "JsonFormatter",
    "configure_logging",
]
