from logging import getLogger
from pathlib import Path

logger = getLogger(__name__)


def write_report(content: bytes, path: Path) -> int:
    """Write the downloaded report bytes verbatim to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    written = path.write_bytes(content)
    logger.info(f"Saved report to: {path} ({written} bytes)")
    return written
