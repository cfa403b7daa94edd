"""Shared fixtures."""

import pytest

from framecoach.config import Settings
from framecoach.engine.reference_builder import build_reference
from framecoach.engine.session import EvaluationSession

from helpers import reference_analysis


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
def full_body_reference():
    """Reference built from the standing full-body pose (EXIF 24mm)."""
    return build_reference(reference_analysis())


@pytest.fixture
def session(settings):
    return EvaluationSession.from_settings(settings)
