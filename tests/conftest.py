"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

# Make the tmlr package importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from tmlr.timeular import TimeularClient


def make_response(status_code=200, payload=None, content=None):
    """Build a mock requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if content is not None:
        response.content = content
        response.json.side_effect = ValueError("Expecting value")
    elif isinstance(payload, Exception):
        response.content = b"<html>"
        response.json.side_effect = payload
    else:
        response.content = b"{}"
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    """A mock requests.Session."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return TimeularClient(session=session, base_url="https://api.test/api/v3", timeout=5)


@pytest.fixture
def note_payload():
    return {
        "text": "pairing with @ana #review",
        "tags": [{"id": 1, "key": "review", "label": "review", "scope": "timeular", "spaceId": "1"}],
        "mentions": [{"id": 2, "key": "ana", "label": "Ana", "scope": "timeular", "spaceId": "1"}],
    }


@pytest.fixture
def account_payload():
    return {"data": {"userId": "u1", "name": "Ana", "email": "ana@example.com", "defaultSpaceId": "1"}}


@pytest.fixture
def spaces_payload():
    return {
        "data": [
            {
                "id": "1",
                "name": "Personal",
                "default": True,
                "members": [{"id": "u1", "name": "Ana", "email": "ana@example.com", "role": "Admin"}],
                "retiredMembers": [{"id": "u9", "name": "Bo"}],
            }
        ]
    }


@pytest.fixture
def activity_payload():
    return {
        "id": "a1",
        "name": "Coding",
        "color": "#a1b2c3",
        "integration": "zei",
        "spaceId": "1",
        "deviceSide": 3,
    }


@pytest.fixture
def activities_payload(activity_payload):
    return {
        "activities": [activity_payload, {**activity_payload, "id": "a2", "deviceSide": None}],
        "inactiveActivities": [],
        "archivedActivities": [{**activity_payload, "id": "a0", "name": "Old"}],
    }


@pytest.fixture
def tracking_payload(note_payload):
    return {
        "currentTracking": {
            "id": "t1",
            "activityId": "a1",
            "startedAt": "2020-08-03T04:00:00.000",
            "note": note_payload,
        }
    }


@pytest.fixture
def time_entry_payload(note_payload):
    return {
        "createdTimeEntry": {
            "id": "e1",
            "activityId": "a1",
            "duration": {"startedAt": "2020-08-03T04:00:00.000", "stoppedAt": "2020-08-03T05:00:00.000"},
            "note": note_payload,
        }
    }
