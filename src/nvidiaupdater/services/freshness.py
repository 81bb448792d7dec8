"""Package index staleness checks."""

import os
from datetime import datetime, timedelta, timezone
from typing import Optional


class IndexFreshnessService:
    """Decides whether the APT package index is old enough to refresh.

    The modification time of a cache file that ``apt-get update`` rewrites is used
    as a proxy for the last successful refresh.
    """

    OLDEST = datetime.min.replace(tzinfo=timezone.utc)

    def __init__(self, logger):
        self.logger = logger

    def last_modified(self, marker_path: str) -> datetime:
        try:
            mtime = os.stat(marker_path).st_mtime
        except OSError as exc:
            self.logger.warning(
                "Could not read timestamp of %s (%s). Assuming the package index is stale.",
                marker_path,
                exc,
            )
            return self.OLDEST
        return datetime.fromtimestamp(mtime, tz=timezone.utc)

    def is_stale(
        self,
        marker_path: str,
        threshold_seconds: float,
        now: Optional[datetime] = None,
    ) -> bool:
        now = now or datetime.now(timezone.utc)
        age = now - self.last_modified(marker_path)
        stale = age > timedelta(seconds=threshold_seconds)
        self.logger.debug(
            "Package index age is %s (threshold %ss): %s",
            age,
            threshold_seconds,
            "stale" if stale else "fresh",
        )
        return stale
