from __future__ import annotations

import pytest

from tests._fixtures.envelope_builder import EnvelopeBuilder


@pytest.fixture
def envelope_builder() -> EnvelopeBuilder:
    """Provide a fresh envelope builder for a throwaway project."""
    return EnvelopeBuilder()
