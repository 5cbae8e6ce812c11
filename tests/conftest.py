import datetime as dt
import json

import pytest

from free_schedule.config import Settings
from free_schedule.intervals import BusyInterval

UTC = dt.timezone.utc


def utc(*args) -> dt.datetime:
    return dt.datetime(*args, tzinfo=UTC)


class FakeSource:
    def __init__(self, busy=None, error=None):
        self.busy = busy or []
        self.error = error
        self.calls = []

    async def get_busy(self, time_min, time_max, timezone):
        self.calls.append((time_min, time_max, timezone))
        if self.error is not None:
            raise self.error
        return list(self.busy)


@pytest.fixture
def settings():
    return Settings(timezone="UTC", locale="en_US")


@pytest.fixture
def monday_busy():
    return [
        BusyInterval(utc(2024, 1, 1, 9), utc(2024, 1, 1, 10)),
        BusyInterval(utc(2024, 1, 2, 8), utc(2024, 1, 2, 20)),
    ]


class FakeCreds:
    def __init__(self, token="fresh"):
        self.token = token

    def to_json(self):
        return json.dumps({"token": self.token})


class FakeFlow:
    """Stands in for both the web Flow class and InstalledAppFlow."""

    def __init__(self, error=None):
        self.error = error
        self.credentials = FakeCreds()
        self.authorization_responses = []
        self.autogenerate_code_verifier = True

    def from_client_secrets_file(self, *args, **kwargs):
        return self

    def authorization_url(self, **kwargs):
        return "https://accounts.google.com/o/oauth2/auth?state=free-schedule", "free-schedule"

    def fetch_token(self, authorization_response):
        self.authorization_responses.append(authorization_response)
        if self.error is not None:
            raise self.error

    def run_local_server(self, port):
        return self.credentials
