"""
The tracking session workflow.

Signs in, reads account, spaces and activities, tracks the first active
activity for a single start/stop interval and downloads the usage report.
Every step runs in order; the first failure halts the sequence.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from logging import getLogger
from typing import Callable, Optional

from tmlr.exceptions import TimeularClientException
from tmlr.models import Account, Activities, Credentials, TimeEntry, TrackingSession, Workspace
from tmlr.timeular import TimeularClient

logger = getLogger(__name__)

REPORT_DAYS = 7
TRACKED_INTERVAL = timedelta(hours=1)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def timestamp(moment: datetime) -> str:
    """Format ``moment`` as the API expects: millisecond precision, no offset."""
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}"


@dataclass(frozen=True)
class SessionOptions:
    started_at: Optional[str] = None
    stopped_at: Optional[str] = None
    report_from: Optional[str] = None
    report_to: Optional[str] = None
    timezone: str = "UTC"

    def resolve(self, now: datetime) -> "SessionOptions":
        """
        Fill every missing timestamp from ``now``.

        The default tracked interval is the hour ending at ``now``.
        """
        return SessionOptions(
            started_at=self.started_at or timestamp(now - TRACKED_INTERVAL),
            stopped_at=self.stopped_at or timestamp(now),
            report_from=self.report_from or timestamp(now - timedelta(days=REPORT_DAYS)),
            report_to=self.report_to or timestamp(now),
            timezone=self.timezone,
        )


@dataclass
class SessionResult:
    account: Account
    workspaces: list[Workspace]
    activities: Activities
    tracking: Optional[TrackingSession] = None
    time_entry: Optional[TimeEntry] = None
    report_size: int = 0


@contextmanager
def _step(name: str):
    try:
        yield
    except TimeularClientException as exc:
        if exc.step is None:
            exc.step = name
        raise


def run_session(
    client: TimeularClient,
    credentials: Credentials,
    write_report: Callable[[bytes], int],
    options: Optional[SessionOptions] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> SessionResult:
    options = (options or SessionOptions()).resolve((clock or utcnow)())

    logger.info("signing in..")
    with _step("sign in"):
        token = client.sign_in(credentials.key, credentials.secret)

    logger.info("fetching me and spaces...")
    with _step("fetch account"):
        account = client.fetch_account(token)
    with _step("fetch spaces"):
        workspaces = client.fetch_workspaces(token)
    logger.info(f"fetched {len(workspaces)} spaces for {account.name} <{account.email}>")

    logger.info("fetching activities...")
    with _step("fetch activities"):
        activities = client.fetch_activities(token)
    result = SessionResult(account=account, workspaces=workspaces, activities=activities)

    if activities.active:
        activity = activities.active[0]
        with _step("start tracking"):
            result.tracking = client.start_tracking(activity.id, token, options.started_at)
        logger.info(f"started tracking: {activity.name} at {result.tracking.started_at}")
        with _step("stop tracking"):
            result.time_entry = client.stop_tracking(token, options.stopped_at)
        logger.info(f"created time entry: {result.time_entry.id}")
    else:
        logger.info("no active activities, skipping tracking")

    logger.info(f"fetching report from {options.report_from} to {options.report_to} ({options.timezone})...")
    with _step("fetch report"):
        content = client.fetch_report(token, options.report_from, options.report_to, options.timezone)
    with _step("write report"):
        result.report_size = write_report(content)

    return result
