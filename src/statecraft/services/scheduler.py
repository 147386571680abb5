"""Background sweep that drives quarter resolution.

Each cycle:

* releases quarters stuck in ``resolving`` longer than the reclaim timeout,
* returns jobs a worker took but never finished to the queue,
* queues a resolution job for every active quarter past its deadline,
* drains pending jobs through :class:`QuarterOrchestrator`.

Blocking store work runs in a worker thread via :func:`asyncio.to_thread`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from statecraft.config import Settings, get_settings
from statecraft.domain.enums import JobStatus
from statecraft.domain.models import JobRecord, QuarterID
from statecraft.domain.rules_config import DEFAULT_RULES, RulesConfig
from statecraft.errors import ConflictError
from statecraft.interfaces import IGameStore
from statecraft.models import utc_now
from statecraft.services.resolution_service import QuarterOrchestrator

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SweepReport:
    reclaimed: list[QuarterID] = field(default_factory=list)
    requeued: list[QuarterID] = field(default_factory=list)
    queued: list[QuarterID] = field(default_factory=list)
    resolved: list[QuarterID] = field(default_factory=list)
    conflicts: list[QuarterID] = field(default_factory=list)
    failed: list[QuarterID] = field(default_factory=list)


class ResolutionScheduler:
    """Periodically reclaim, queue and resolve quarters."""

    MIN_INTERVAL_SECONDS = 0.1

    def __init__(
        self,
        store_factory: Callable[[], IGameStore],
        *,
        settings: Settings | None = None,
        rules: RulesConfig = DEFAULT_RULES,
        clock: Callable[[], datetime] = utc_now,
        batch_size: int = 20,
    ) -> None:
        self._store_factory = store_factory
        self._settings = settings or get_settings()
        self._rules = rules
        self._clock = clock
        self._batch_size = batch_size
        self._interval = max(self._settings.sweep_interval_seconds, self.MIN_INTERVAL_SECONDS)
        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()
        self._cycle_lock = asyncio.Lock()

    @property
    def interval_seconds(self) -> float:
        return self._interval

    def set_interval(self, seconds: float) -> None:
        self._interval = max(seconds, self.MIN_INTERVAL_SECONDS)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run_loop(), name="statecraft-resolution-loop")

    async def stop(self) -> None:
        task = self._task
        if task is None:
            return
        self._stop_event.set()
        await task
        self._task = None

    async def run_once(self) -> SweepReport:
        """Run one sweep cycle now."""

        async with self._cycle_lock:
            return await asyncio.to_thread(self.sweep_sync)

    async def _run_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
                    break
                except TimeoutError:
                    pass
                try:
                    await self.run_once()
                except Exception:
                    logger.exception("Resolution sweep failed")
        finally:
            self._task = None

    # --- synchronous work ------------------------------------------------------

    def sweep_sync(self) -> SweepReport:
        report = SweepReport()
        now = self._clock()
        cutoff = now - timedelta(seconds=self._settings.resolving_timeout_seconds)

        store = self._store_factory()
        try:
            report.reclaimed = [q.id for q in store.reclaim_stale_quarters(cutoff)]
            report.requeued = [job.quarter_id for job in store.reclaim_stale_jobs(cutoff)]
            for quarter in store.find_expired_quarters(now):
                _, created = store.enqueue_resolution_job(quarter.id, quarter.game_id)
                if created:
                    report.queued.append(quarter.id)
            store.commit()
        finally:
            store.close()

        self.drain_jobs_sync(report)
        return report

    def requeue_sync(self, quarter_id: QuarterID) -> int:
        """Put an active quarter back in the queue, reviving a failed job."""

        store = self._store_factory()
        try:
            job_id = store.requeue_quarter(quarter_id)
            store.commit()
        finally:
            store.close()
        logger.info("Quarter %s requeued as job %s", quarter_id, job_id)
        return job_id

    def drain_jobs_sync(self, report: SweepReport | None = None) -> SweepReport:
        """Run every pending job once."""

        report = report if report is not None else SweepReport()
        store = self._store_factory()
        try:
            jobs = store.claim_pending_jobs(self._batch_size, self._clock())
            store.commit()
            for job in jobs:
                self._run_job(store, job, report)
        finally:
            store.close()
        return report

    def _run_job(self, store: IGameStore, job: JobRecord, report: SweepReport) -> None:
        orchestrator = QuarterOrchestrator(store, rules=self._rules, clock=self._clock)
        try:
            orchestrator.resolve(job.quarter_id, job.game_id)
        except ConflictError:
            store.mark_job_done(job.id)
            store.commit()
            report.conflicts.append(job.quarter_id)
            return
        except Exception as exc:
            updated = store.mark_job_failed(job.id, str(exc), self._settings.job_max_attempts)
            store.commit()
            report.failed.append(job.quarter_id)
            if updated.status == JobStatus.FAILED:
                logger.error(
                    "Resolution job %s for quarter %s failed permanently after %d attempts",
                    job.id,
                    job.quarter_id,
                    updated.attempts,
                )
            else:
                logger.warning(
                    "Resolution job %s for quarter %s failed (attempt %d): %s",
                    job.id,
                    job.quarter_id,
                    updated.attempts,
                    exc,
                )
            return

        store.mark_job_done(job.id)
        store.commit()
        report.resolved.append(job.quarter_id)
