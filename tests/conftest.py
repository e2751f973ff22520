"""
Global pytest fixtures and configuration for test suite.

This module provides reusable fixtures for:
- HTTP clients
- Environment isolation
- A scripted cleaning collaborator and a recording notifier
- Revision sessions wired to them
"""

import asyncio
import os
from typing import AsyncGenerator, Callable, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from textify.api.app import app
from textify.api.routes.revision import get_text_cleaner
from textify.exceptions import CleaningError
from textify.models.cleaning import CleanRequest, CleanResponse
from textify.revision.session import RevisionSession


class ScriptedCleaner:
    """
    Cleaning collaborator double.

    Returns ``result`` (a string, or a callable of the request text), raises
    ``error`` when set, and records every request it receives. When ``gate``
    is set the call waits on it, which keeps a clean in flight.
    """

    def __init__(
        self,
        result="Hello world",
        error: Optional[Exception] = None,
        gate: Optional[asyncio.Event] = None,
    ):
        self.result = result
        self.error = error
        self.gate = gate
        self.requests: List[CleanRequest] = []

    async def clean(self, request: CleanRequest) -> CleanResponse:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        text = self.result(request.text) if callable(self.result) else self.result
        return CleanResponse(cleaned_text=text)


class RecordingNotifier:
    """Notifier double that records feedback instead of showing it."""

    def __init__(self):
        self.errors: List[Tuple[str, str]] = []
        self.infos: List[Tuple[str, str]] = []
        self.shakes = 0

    def error(self, title: str, description: str) -> None:
        self.errors.append((title, description))

    def info(self, title: str, description: str) -> None:
        self.infos.append((title, description))

    def shake(self) -> None:
        self.shakes += 1


@pytest.fixture
def cleaner_factory() -> Callable[..., ScriptedCleaner]:
    """Build ScriptedCleaner instances with custom behavior."""
    return ScriptedCleaner


@pytest.fixture
def cleaner() -> ScriptedCleaner:
    return ScriptedCleaner()


@pytest.fixture
def failing_cleaner() -> ScriptedCleaner:
    return ScriptedCleaner(error=CleaningError("Failed to get cleaned text from the model."))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def make_session(notifier) -> Callable[..., RevisionSession]:
    """Factory for sessions sharing the test notifier; auto-clean off unless asked."""

    def _make(cleaner, **kwargs) -> RevisionSession:
        kwargs.setdefault("auto_clean", False)
        return RevisionSession(cleaner, notifier=notifier, **kwargs)

    return _make


@pytest.fixture
def session(make_session, cleaner) -> RevisionSession:
    return make_session(cleaner)


@pytest_asyncio.fixture
async def async_client(cleaner) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing FastAPI endpoints.

    The cleaning collaborator is replaced by the scripted ``cleaner`` fixture.

    Yields:
        AsyncClient instance
    """
    app.dependency_overrides[get_text_cleaner] = lambda: cleaner
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables before each test.

    This prevents test pollution from env var changes.
    """
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Configuration for pytest-asyncio
def pytest_configure(config):
    """
    Configure pytest with custom markers and settings.
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (API, end-to-end)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests that may take longer to run"
    )
