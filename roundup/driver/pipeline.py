"""Concurrent extraction of issue records.

This module contains the pipeline that turns a batch of issue rows into
IssueRecords using a fixed number of worker threads.

The pipeline mirrors a queue-and-workers driver:

1. Every row is placed on a work queue, tagged with its index
2. A bounded number of workers drain the queue, each calling the extractor
3. Results are written at their row index under a lock
4. The call joins every worker before returning, so callers never see a
   partially filled result list
"""

from __future__ import annotations

import logging
import os
import queue
import threading
from collections.abc import Sequence

from roundup.common.document import HtmlNode
from roundup.common.exceptions import ExtractionCancelled
from roundup.common.fields import FieldExtractor
from roundup.data_types import IssueRecord

logger = logging.getLogger(__name__)


def default_worker_count() -> int:
    """Worker count sized to the machine, capped at 32."""
    return min(32, (os.cpu_count() or 1) + 4)


class ConcurrentExtractionPipeline:
    """Extracts IssueRecords from rows using a bounded pool of threads.

    Example usage::

        pipeline = ConcurrentExtractionPipeline(FieldExtractor(), max_workers=8)
        records = pipeline.extract_all(rows, "Saga")
        assert len(records) == len(rows)
    """

    def __init__(
        self,
        extractor: FieldExtractor | None = None,
        max_workers: int | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            extractor: FieldExtractor applied to each row. Defaults to the
                issue-row schema.
            max_workers: Upper bound on worker threads. Defaults to
                default_worker_count(). Never more threads than rows are
                started.
        """
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.extractor = extractor or FieldExtractor()
        self.max_workers = max_workers or default_worker_count()

    def extract_all(
        self,
        rows: Sequence[HtmlNode],
        title_name: str,
        stop_event: threading.Event | None = None,
    ) -> list[IssueRecord]:
        """Extract one record per row.

        Args:
            rows: Issue row nodes.
            title_name: Series name stored in every record's ``title``.
            stop_event: Optional threading.Event for cancellation. When set,
                workers finish the row they are on and take no more.

        Returns:
            Exactly ``len(rows)`` records, in row order.

        Raises:
            ExtractionCancelled: If stop_event was set before every row was
                extracted.
        """
        total = len(rows)
        if total == 0:
            return []

        work: queue.Queue[tuple[int, HtmlNode]] = queue.Queue()
        for index, row in enumerate(rows):
            work.put((index, row))

        results: list[IssueRecord | None] = [None] * total
        lock = threading.Lock()
        completed = 0

        def worker() -> None:
            nonlocal completed
            while True:
                # Check for cancellation before taking the next row
                if stop_event and stop_event.is_set():
                    break
                try:
                    index, row = work.get_nowait()
                except queue.Empty:
                    break
                try:
                    record = self._extract_row(row, title_name, index)
                    with lock:
                        results[index] = record
                        completed += 1
                finally:
                    work.task_done()

        num_workers = min(self.max_workers, total)
        threads = [
            threading.Thread(
                target=worker, name=f"roundup-extract-{i}", daemon=True
            )
            for i in range(num_workers)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        if completed < total:
            logger.info(
                f"Extraction of '{title_name}' cancelled after "
                f"{completed}/{total} rows"
            )
            raise ExtractionCancelled(completed=completed, total=total)

        logger.debug(
            f"Extracted {total} issues for '{title_name}' "
            f"with {num_workers} workers"
        )
        return [record for record in results if record is not None]

    def _extract_row(
        self, row: HtmlNode, title_name: str, index: int
    ) -> IssueRecord:
        """Extract one row, degrading to an all-"N/A" record on failure."""
        try:
            return self.extractor.extract(row, title_name)
        except Exception:
            logger.exception(
                f"Extraction failed for row {index} of '{title_name}'",
                extra={"row_index": index, "title": title_name},
            )
            return IssueRecord(title=title_name)
