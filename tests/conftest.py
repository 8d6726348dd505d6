"""Pytest configuration and shared fixtures."""

import datetime as dt
import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from campdesk.api.client import ApiClient
from campdesk.domain.models import Base, Shift


def pytest_configure(config):
    """Configure pytest."""
    # Add custom markers
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (deselect with '-m \"not integration\"')"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


class FakeResponse:
    """Stand-in for ``requests.Response``."""

    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        if text is not None:
            self.text = text
        elif body is not None:
            self.text = json.dumps(body)
        else:
            self.text = ""
        self.content = self.text.encode("utf-8")

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body


class FakeSession:
    """Records requests and replays queued responses (or a default 200/[])."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def queue(self, response):
        self.responses.append(response)

    def request(self, method, url, params=None, json=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json, "timeout": timeout})
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return FakeResponse(200, [])


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def api_client(fake_session):
    return ApiClient("http://backend.test", timeout=5, session=fake_session)


@pytest.fixture
def db_session():
    """Create in-memory database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def make_shift():
    """Build an in-memory shift from ``HH:MM`` strings."""

    def _make(shift_id, user_id="u1", day=dt.date(2024, 1, 1), start="09:00", end="17:00",
              status="scheduled", role="Front Desk"):
        def at(clock):
            if clock is None:
                return None
            hour, minute = (int(part) for part in clock.split(":"))
            return dt.datetime(day.year, day.month, day.day, hour, minute)

        return Shift(
            shift_id=shift_id,
            campground_id="cg1",
            user_id=user_id,
            shift_date=day,
            start_time=at(start) if day else None,
            end_time=at(end) if day else None,
            role=role,
            status=status,
        )

    return _make
