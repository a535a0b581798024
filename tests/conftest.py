"""Shared fixtures for face analyzer tests.

All landmark frames are synthetic; no camera or model is needed.
"""

import pytest

from analyzer_config import AnalyzerConfig
from face_analyzer import FaceAnalyzer
from helpers import FakeClock, make_frame


@pytest.fixture
def frame():
    """Neutral face: eyes open, mouth closed, head centered."""
    return make_frame()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def events():
    return []


@pytest.fixture
def make_analyzer(events):
    """Factory for analyzers that append every event to `events`."""
    def _make(**overrides):
        config = AnalyzerConfig(**overrides)
        return FaceAnalyzer(events.append, config)
    return _make
