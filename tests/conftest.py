"""
Pytest configuration and shared fixtures for transaction runner tests
"""

import pytest

from txsaga.core.config import reset_config
from txsaga.core.logger import set_logger

# ============================================
# AUTO-USE FIXTURES
# ============================================


@pytest.fixture(autouse=True)
def isolated_globals():
    """
    Reset process-wide configuration and the custom logger around each test.

    Tests that call configure() or set_logger() would otherwise leak into
    the rest of the session.
    """
    reset_config()
    set_logger(None)

    yield

    reset_config()
    set_logger(None)


# ============================================
# STEP HELPERS
# ============================================


class CallRecorder:
    """Records the order in which work and compensation callables run."""

    def __init__(self):
        self.calls = []

    def ok(self, label):
        def work():
            self.calls.append(label)

        work.__name__ = label
        return work

    def fail(self, label, failure):
        def work():
            self.calls.append(label)
            return failure

        work.__name__ = label
        return work


@pytest.fixture
def recorder():
    """Fresh CallRecorder for a test."""
    return CallRecorder()
