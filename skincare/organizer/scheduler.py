"""Scheduled expiry checks."""

from __future__ import annotations

import logging
from datetime import date

from .datemath import format_display_date
from .expiry import effective_expiry, expiring_within

logger = logging.getLogger(__name__)


class ExpiryAlertScheduler:
    """Periodically logs products that are expired or expiring soon.

    Uses APScheduler for cron-based scheduling.
    """

    def __init__(self, config) -> None:
        """Initialize scheduler with an OrganizerConfig.

        Args:
            config: OrganizerConfig instance.

        Raises:
            ImportError: If apscheduler is not installed.
        """
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.cron import CronTrigger
        except ImportError:
            raise ImportError(
                "apscheduler is required: pip install apscheduler"
            )

        self._config = config
        self._scheduler = AsyncIOScheduler()
        self._CronTrigger = CronTrigger
        self._running = False

    def setup_jobs(self) -> None:
        """Register scheduled jobs based on config."""
        trigger = self._parse_cron(self._config.alerts.schedule)
        self._scheduler.add_job(
            self._job_check_expiry,
            trigger=trigger,
            id="check_expiry",
            name="Expiry check",
            replace_existing=True,
        )
        logger.info("Registered expiry check job: %s", self._config.alerts.schedule)

    def start(self) -> None:
        """Start the scheduler."""
        self.setup_jobs()
        self._scheduler.start()
        self._running = True
        logger.info("Scheduler started")

    def stop(self) -> None:
        """Stop the scheduler."""
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    @property
    def running(self) -> bool:
        return self._running

    def get_jobs(self) -> list[dict]:
        """Return info about scheduled jobs."""
        jobs = []
        for job in self._scheduler.get_jobs():
            next_run = getattr(job, "next_run_time", None)
            jobs.append({
                "id": job.id,
                "name": job.name,
                "next_run": str(next_run) if next_run else None,
            })
        return jobs

    def _parse_cron(self, expr: str):
        """Parse a cron expression into a CronTrigger."""
        parts = expr.split()
        if len(parts) == 5:
            return self._CronTrigger(
                minute=parts[0],
                hour=parts[1],
                day=parts[2],
                month=parts[3],
                day_of_week=parts[4],
            )
        raise ValueError(f"Invalid cron expression: {expr}")

    def check_expiry(self, today: date | None = None) -> list[dict]:
        """Log and return products due within ``alerts.warn_days``."""
        from .db import ProductStore

        if today is None:
            today = date.today()

        store = ProductStore(self._config.storage.path)
        try:
            records = store.load()
        finally:
            store.close()

        due = expiring_within(records, self._config.alerts.warn_days, today=today)
        for record in due:
            expires = effective_expiry(record)
            level = logging.WARNING if expires < today else logging.INFO
            logger.log(
                level,
                "%s expires %s",
                record.get("productName"),
                format_display_date(expires),
            )
        return due

    async def _job_check_expiry(self) -> None:
        logger.info("Running expiry check...")
        try:
            due = self.check_expiry()
            logger.info("%d product(s) expired or expiring soon", len(due))
        except Exception:
            logger.exception("Expiry check failed")
