import argparse
import logging
import sys
from functools import partial
from logging import getLogger

import requests

from tmlr.config import load_settings
from tmlr.exceptions import ConfigError, TimeularClientException
from tmlr.reports import write_report
from tmlr.timeular import TimeularClient
from tmlr.workflow import SessionOptions, run_session

logger = getLogger("tmlr")


def setup_logging(debug=False):
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Signs in to Timeular, tracks the first active activity once and downloads a report"
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Run in debug mode"
    )
    parser.add_argument(
        "--started-at",
        help="Tracking start timestamp, e.g. 2020-08-03T04:00:00.000. Defaults to now."
    )
    parser.add_argument(
        "--stopped-at",
        help="Tracking stop timestamp. Defaults to the start timestamp."
    )
    parser.add_argument(
        "--from",
        dest="report_from",
        help="Report range start. Defaults to 7 days ago."
    )
    parser.add_argument(
        "--to",
        dest="report_to",
        help="Report range end. Defaults to now."
    )
    parser.add_argument(
        "--timezone",
        help="Report timezone, e.g. Europe/Vienna"
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Where to write the CSV report (default: ./report.csv)"
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as exc:
        setup_logging(debug=args.debug)
        logger.error(f"configuration failed: {exc}")
        return 2

    debug = args.debug or settings.debug
    setup_logging(debug=debug)

    options = SessionOptions(
        started_at=args.started_at,
        stopped_at=args.stopped_at,
        report_from=args.report_from,
        report_to=args.report_to,
        timezone=args.timezone or settings.timezone,
    )
    output = args.output or settings.report_path

    with requests.Session() as session:
        client = TimeularClient(session=session, base_url=settings.base_url, timeout=settings.timeout, debug=debug)
        try:
            run_session(client, settings.credentials, partial(write_report, path=output), options)
        except TimeularClientException as exc:
            logger.error(f"{exc.step or 'session'} failed: {exc}")
            return 1
        except OSError as exc:
            logger.error(f"write report failed: {exc}")
            return 1

    logger.info("Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
