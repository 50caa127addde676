"""
Pytest configuration and fixtures for the intercept engine tests.
"""

import os
import sys
import pytest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment
os.environ['TESTING'] = '1'
os.environ.setdefault('GEMINI_API_KEY', 'test-api-key')

from pulse.aggregation.news_stream import NewsStream
from pulse.generation.image_generator import ImageGenerator
from pulse.generation.key_gate import ApiKeyGate
from pulse.generation.video_generator import VideoGenerator
from pulse.intent.classifier import IntentClassifier
from pulse.models.content import Intent, PersonDossier
from pulse.orchestrator import ActionDispatcher
from pulse.research.identity_researcher import IdentityResearcher
from pulse.session.state import SessionState
from tests.helpers import FIXED_NOW, FakeSweeper


# ============================================================
# Gemini Fixtures
# ============================================================

@pytest.fixture
def mock_genai_client():
    """A genai.Client stand-in with async model and operation calls."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock()
    client.aio.models.generate_videos = AsyncMock()
    client.aio.operations.get = AsyncMock()
    return client


# ============================================================
# Sample Data Fixtures
# ============================================================

@pytest.fixture
def sample_dossier():
    return PersonDossier(
        full_name="Ada Lovelace",
        occupation="Analyst",
        current_residence="London",
        family_links=["Lord Byron"],
        public_identifiers=["@ada"],
        recent_activity="Published notes on the Analytical Engine.",
        digital_footprint_score=72,
    )


# ============================================================
# Engine Fixtures
# ============================================================

@pytest.fixture
def session():
    return SessionState()


@pytest.fixture
def fake_sweeper():
    return FakeSweeper()


@pytest.fixture
def stream(fake_sweeper, session):
    return NewsStream(
        sweeper=fake_sweeper,
        session=session,
        topic="Global High-Frequency Intercepts",
        live=False,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def key_gate():
    return ApiKeyGate(api_key="paid-key")


@pytest.fixture
def dispatcher(stream, session, key_gate):
    """Dispatcher with mocked remote pipelines and a real stream/session."""
    classifier = MagicMock(spec=IntentClassifier)
    classifier.classify = AsyncMock(return_value=Intent.NEWS)

    image_generator = MagicMock(spec=ImageGenerator)
    image_generator.generate_image = AsyncMock(return_value="data:image/png;base64,AAAA")

    video_generator = MagicMock(spec=VideoGenerator)
    video_generator.generate_video = AsyncMock(return_value="output/videos/1.mp4")

    identity_researcher = MagicMock(spec=IdentityResearcher)
    identity_researcher.lookup_identity = AsyncMock()

    return ActionDispatcher(
        classifier=classifier,
        image_generator=image_generator,
        video_generator=video_generator,
        identity_researcher=identity_researcher,
        stream=stream,
        session=session,
        key_gate=key_gate,
        clock=lambda: FIXED_NOW,
    )
