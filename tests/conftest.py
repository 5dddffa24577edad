from __future__ import annotations

import random

import pytest

from tests.helpers import make_synthesizer, no_sleep
from truthguard.app import create_flask_app
from truthguard.config.settings import Settings
from truthguard.processors.synthesizer import ContentSynthesizer
from truthguard.storage.session_history import SessionHistoryStore


@pytest.fixture
def scripted_synthesizer():
    """Factory building a synthesizer that replays the given random values."""
    return make_synthesizer


@pytest.fixture
def seeded_synthesizer() -> ContentSynthesizer:
    """A synthesizer driven by a seeded PRNG with the delay stubbed out."""
    return ContentSynthesizer(rng=random.Random(1234), sleep=no_sleep)


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings for tests: no delay, fixed secret, log file in a temp dir."""
    return Settings(
        test_mode=True,
        secret_key="test-secret",
        min_delay_seconds=0.0,
        max_delay_seconds=0.0,
        log_file=str(tmp_path / "truthguard_test.log"),
    )


@pytest.fixture
def app(test_settings, seeded_synthesizer):
    history = SessionHistoryStore(
        capacity=test_settings.history_capacity,
        max_sessions=test_settings.max_sessions,
    )
    flask_app = create_flask_app(test_settings, seeded_synthesizer, history)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
