"""
Pulse Intercept Engine

A single command line routed by Gemini to one of four workflows:
1. News - Grounded OSINT sweeps merged into a live, deduplicated stream
2. Intel - Identity dossiers built from public search results
3. Image - One-shot image synthesis
4. Video - Veo video synthesis tracked to completion by polling
"""

# Core models
from .models.content import (
    Intent,
    NewsItem,
    NewsSource,
    PersonDossier,
    GeneratedAsset,
)
from .models.session import ViewMode, SessionViewState, SessionSnapshot

# Pipelines
from .intent.classifier import IntentClassifier, parse_intent
from .generation.image_generator import ImageGenerator
from .generation.video_generator import VideoGenerator
from .generation.key_gate import ApiKeyGate
from .research.identity_researcher import IdentityResearcher

# Streaming
from .aggregation.news_sweeper import NewsSweeper, SweepResult
from .aggregation.news_stream import NewsStream, merge_news

# Session
from .session.state import SessionState
from .orchestrator import ActionDispatcher

__all__ = [
    # Models
    "Intent",
    "NewsItem",
    "NewsSource",
    "PersonDossier",
    "GeneratedAsset",
    "ViewMode",
    "SessionViewState",
    "SessionSnapshot",
    # Pipelines
    "IntentClassifier",
    "parse_intent",
    "ImageGenerator",
    "VideoGenerator",
    "ApiKeyGate",
    "IdentityResearcher",
    # Streaming
    "NewsSweeper",
    "SweepResult",
    "NewsStream",
    "merge_news",
    # Session
    "SessionState",
    "ActionDispatcher",
]
