from logging import getLogger
from typing import Any, Optional
from urllib.parse import quote

import requests

from tmlr.exceptions import AuthError, DecodeError, TransportError
from tmlr.models import (
    Account,
    AccountEnvelope,
    Activities,
    SignInRequest,
    SpacesEnvelope,
    StopTrackingRequest,
    TimeEntry,
    TimeEntryEnvelope,
    TrackingEnvelope,
    TrackingRequest,
    TrackingSession,
    Workspace,
    decode,
    unwrap,
)

logger = getLogger(__name__)

BASE_URL = "https://api.timeular.com/api/v3"
DEFAULT_TIMEOUT = 30.0


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TimeularClient:
    def __init__(self, session=None, base_url=None, timeout=DEFAULT_TIMEOUT, debug=False) -> None:
        # one session for the client's lifetime, so connections are reused
        self.session = session if session is not None else requests.Session()
        self._base_url = (base_url or BASE_URL).rstrip("/")
        self._timeout = timeout
        self._debug = debug
        if self._debug:
            logger.debug(f"Running Timeular client with base_url={self.base_url}, timeout={self.timeout}")

    @property
    def base_url(self):
        return self._base_url

    @property
    def timeout(self):
        return self._timeout

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, token: Optional[str] = None, **kwargs) -> requests.Response:
        url = self.url(path)
        if token is not None:
            kwargs["headers"] = {**kwargs.get("headers", {}), **auth(token)}
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}", url=url) from exc

        if self._debug:
            logger.debug(f"{method} {url}: sc={response.status_code}")
        return response

    def _checked(self, method: str, path: str, token: Optional[str] = None, **kwargs) -> requests.Response:
        response = self._send(method, path, token=token, **kwargs)
        if not response.ok:
            raise TransportError(
                f"{method} {self.url(path)} returned HTTP {response.status_code}",
                status_code=response.status_code,
                url=self.url(path),
            )
        return response

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"response body is not valid JSON: {exc}") from exc

    def sign_in(self, key: str, secret: str) -> str:
        body = SignInRequest(api_key=key, api_secret=secret)
        response = self._send("POST", "/developer/sign-in", json=body.to_dict())
        if not response.ok:
            raise AuthError(f"sign-in rejected with HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthError("sign-in response is not valid JSON") from exc

        token = payload.get("token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthError("sign-in response does not contain a token")
        return token

    def fetch_account(self, token: str) -> Account:
        response = self._checked("GET", "/me", token=token)
        return unwrap(AccountEnvelope, self._json(response))

    def fetch_workspaces(self, token: str) -> list[Workspace]:
        response = self._checked("GET", "/space", token=token)
        spaces = unwrap(SpacesEnvelope, self._json(response))
        if self._debug:
            logger.debug(f"Got {len(spaces)} spaces")
        return spaces

    def fetch_activities(self, token: str) -> Activities:
        response = self._checked("GET", "/activities", token=token)
        activities = decode(Activities, self._json(response))
        if self._debug:
            logger.debug(
                f"Got activities: active={len(activities.active)}, "
                f"inactive={len(activities.inactive)}, archived={len(activities.archived)}"
            )
        return activities

    def start_tracking(self, activity_id: str, token: str, started_at: str) -> TrackingSession:
        body = TrackingRequest(started_at=started_at)
        response = self._checked(
            "POST", f"/tracking/{quote(activity_id, safe='')}/start", token=token, json=body.to_dict()
        )
        return unwrap(TrackingEnvelope, self._json(response))

    def stop_tracking(self, token: str, stopped_at: str) -> TimeEntry:
        body = StopTrackingRequest(stopped_at=stopped_at)
        response = self._checked("POST", "/tracking/stop", token=token, json=body.to_dict())
        return unwrap(TimeEntryEnvelope, self._json(response))

    def fetch_report(self, token: str, start: str, stop: str, timezone: str) -> bytes:
        response = self._checked(
            "GET",
            f"/report/{quote(start, safe=':')}/{quote(stop, safe=':')}",
            token=token,
            params={"timezone": timezone},
        )
        if self._debug:
            logger.debug(f"Got report: {len(response.content)} bytes")
        return response.content
