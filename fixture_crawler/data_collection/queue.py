"""
In-memory request queue.

Owned by the orchestrator and injected where needed; there is no
process-wide queue. Jobs are de-duplicated by ``unique_key`` and served in
FIFO order.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Mapping, Optional

from ..common.logging_utils import get_logger
from ..domain.contracts import CrawlJob, Stage, normalize_stage


class RequestQueue:
    def __init__(self):
        self._pending: deque[CrawlJob] = deque()
        self._seen: set[str] = set()
        self.handled_count = 0
        self.logger = get_logger(__name__)

    def add(self, job: CrawlJob) -> bool:
        """Queue a job. Returns False if a job with the same key was already queued."""
        if job.unique_key in self._seen:
            self.logger.debug("Skipping duplicate request %s", job.unique_key)
            return False
        self._seen.add(job.unique_key)
        self._pending.append(job)
        self.logger.debug("Queued %s job for %s", job.stage.value, job.url)
        return True

    def enqueue(
        self,
        url: str,
        stage: str | Stage,
        payload: Optional[Mapping[str, Any]] = None,
        unique_key: str = "",
    ) -> bool:
        return self.add(CrawlJob(url=url, stage=normalize_stage(stage), payload=payload or {}, unique_key=unique_key))

    def fetch_next(self) -> Optional[CrawlJob]:
        if not self._pending:
            return None
        return self._pending.popleft()

    def mark_handled(self, job: CrawlJob) -> None:
        self.handled_count += 1

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def is_finished(self) -> bool:
        return not self._pending


__all__ = ["RequestQueue"]
