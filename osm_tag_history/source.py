"""Read OSM (history) files with osmium and write the tag changes."""
import logging
import time

import osmium

from .errors import InputError
from .records import ObjectKind, ObjectVersion

log = logging.getLogger(__name__)

PROGRESS_CHECK_EVERY = 1000


def format_duration(seconds):
    """Human readable duration, e.g. ' 5s', '12m03s', '2h05m00s', '1d3h00m00s'."""
    sec = int(round(seconds))
    if sec < 60:
        return f"{sec:2}s"
    minutes, sec = divmod(sec, 60)
    if minutes < 60:
        return f"{minutes:2}m{sec:02}s"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h{minutes:02}m{sec:02}s"
    days, hours = divmod(hours, 24)
    return f"{days}d{hours}h{minutes:02}m{sec:02}s"


class TagHistoryHandler(osmium.SimpleHandler):
    """Feed every object version of a file into a TagHistoryDiffer and write the rows."""

    def __init__(self, differ, formatter, writer, log_frequency=10.0):
        super().__init__()
        self.differ = differ
        self.formatter = formatter
        self.writer = writer
        self.log_frequency = log_frequency
        self.rows_written = 0
        self.started = time.monotonic()
        self._last_progress = self.started
        self._objects_at_last_progress = 0

    def node(self, n):
        self._process(ObjectVersion.from_osmium(ObjectKind.NODE, n))

    def way(self, w):
        self._process(ObjectVersion.from_osmium(ObjectKind.WAY, w))

    def relation(self, r):
        self._process(ObjectVersion.from_osmium(ObjectKind.RELATION, r))

    def _process(self, obj):
        for event in self.differ.process(obj):
            rows = self.formatter.rows(event)
            self.writer.writerows(rows)
            self.rows_written += len(rows)

        if self.differ.objects_seen % PROGRESS_CHECK_EVERY == 0:
            self._log_progress()

    def _log_progress(self):
        now = time.monotonic()
        elapsed = now - self._last_progress
        if elapsed < self.log_frequency:
            return
        objects = self.differ.objects_seen
        rate = (objects - self._objects_at_last_progress) / elapsed
        log.info(
            f"Running: {objects:,} objects, {self.rows_written:,} rows written "
            f"({rate:,.0f} objects/s, elapsed {format_duration(now - self.started)})"
        )
        self._last_progress = now
        self._objects_at_last_progress = objects

    def run(self, input_file):
        try:
            self.apply_file(input_file, locations=False)
        except RuntimeError as e:
            raise InputError(f"Error reading {input_file}: {e}") from e
        elapsed = time.monotonic() - self.started
        log.info(
            f"Finished in {format_duration(elapsed).strip()}: "
            f"{self.differ.objects_seen:,} objects, {self.differ.changes_found:,} tag changes, "
            f"{self.rows_written:,} rows written"
        )
