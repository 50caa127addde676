"""Media generation pipelines."""

from .image_generator import ImageGenerator
from .video_generator import VideoGenerator
from .key_gate import ApiKeyGate, RequestKeySelector, console_key_selector

__all__ = [
    "ImageGenerator",
    "VideoGenerator",
    "ApiKeyGate",
    "RequestKeySelector",
    "console_key_selector",
]
