"""Shared pytest fixtures"""

import pytest

from core.config import Settings
from core.models.batch import RetryPolicy
from core.batch import BatchScheduler
from core.providers.mock import MockAudioProvider, MockRenderProvider
from tests.mocks.fixtures import (
    make_cue,
    make_srt,
    RecordingSleep,
)


# ============================================================
# Scheduler
# ============================================================

@pytest.fixture
def recording_sleep():
    """Sleep replacement that records requested delays without waiting"""
    return RecordingSleep()


@pytest.fixture
def fast_scheduler(recording_sleep):
    """Scheduler with production defaults but no real waiting"""
    return BatchScheduler(
        batch_size=5,
        inter_batch_delay=5.0,
        retry=RetryPolicy(max_attempts=6, base_delay=1.0),
        sleep=recording_sleep,
    )


# ============================================================
# Providers and settings
# ============================================================

@pytest.fixture
def mock_audio_provider():
    """Fresh mock speech provider for each test"""
    provider = MockAudioProvider()
    yield provider
    provider.reset()


@pytest.fixture
def mock_render_provider():
    provider = MockRenderProvider()
    yield provider
    provider.reset()


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings isolated from the developer's environment and .env"""
    monkeypatch.chdir(tmp_path)
    return Settings(
        _env_file=None,
        inter_batch_delay=0,
        retry_base_delay=0,
        scratch_root=str(tmp_path / "scratch"),
        storage_dir=str(tmp_path / "storage"),
        user_id="42",
    )


# ============================================================
# Test Data Fixtures
# ============================================================

@pytest.fixture
def sample_cue():
    """A seven-word cue spanning two seconds"""
    return make_cue(text="one two three four five six seven")


@pytest.fixture
def sample_srt():
    """Three-cue SRT document"""
    return make_srt([
        (1, 0, 2000, "Hello there general Kenobi you are"),
        (2, 2000, 3500, "a bold one"),
        (3, 4000, 9000, "this line has exactly eight words in it"),
    ])


# ============================================================
# Markers Configuration
# ============================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "live_api: marks tests that hit real APIs (requires keys)"
    )
