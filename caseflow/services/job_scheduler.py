"""
Delayed job scheduler module

Thin wrapper over APScheduler. Jobs are keyed by case ID so a redelivered
schedule replaces the earlier one instead of running twice. With
JOB_STORE_URL set, pending jobs live in a SQLAlchemy job store and survive a
restart.
"""
from datetime import datetime, timedelta
from typing import Callable, Optional, Dict, Any
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger
from config.settings import settings
from caseflow.utils.logger import get_logger

logger = get_logger(__name__)

AUTO_VERIFY_JOB = "auto-verify"
AUTO_ASSIGN_JOB = "auto-assign"
NOTIFICATION_JOB = "notify"
RECONCILE_SWEEP_JOB = "reconcile-sweep"


def job_id(kind: str, key: str) -> str:
    """Job ID for a job kind and key (e.g. auto-verify:<case id>)"""
    return f"{kind}:{key}"


class JobScheduler:
    """Background scheduler for delayed case jobs"""

    def __init__(self, job_store_url: Optional[str] = None):
        self.job_store_url = job_store_url if job_store_url is not None else settings.job_store_url
        self.scheduler: Optional[BackgroundScheduler] = None

    def _build(self) -> BackgroundScheduler:
        if self.job_store_url:
            jobstores = {"default": SQLAlchemyJobStore(url=self.job_store_url)}
        else:
            jobstores = {"default": MemoryJobStore()}
        return BackgroundScheduler(jobstores=jobstores, timezone="UTC")

    @property
    def running(self) -> bool:
        return bool(self.scheduler and self.scheduler.running)

    def start(self) -> None:
        """Start the scheduler and register the periodic sweep when enabled"""
        if self.running:
            return

        self.scheduler = self._build()
        self.scheduler.start()

        if settings.reconcile_sweep_interval_minutes > 0:
            from caseflow.services.jobs import run_reconcile_sweep

            self.scheduler.add_job(
                run_reconcile_sweep,
                trigger=IntervalTrigger(minutes=settings.reconcile_sweep_interval_minutes),
                id=RECONCILE_SWEEP_JOB,
                name="Reconcile case lawyer assignments",
                replace_existing=True,
                max_instances=1,
                misfire_grace_time=300,
            )

        logger.info(
            f"Job scheduler started (store={'sqlalchemy' if self.job_store_url else 'memory'}, "
            f"sweep every {settings.reconcile_sweep_interval_minutes} min)"
        )

    def shutdown(self) -> None:
        """Stop the scheduler without waiting for running jobs"""
        if self.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Job scheduler shut down")
        self.scheduler = None

    def schedule(
        self,
        kind: str,
        key: str,
        func: Callable,
        delay_seconds: float = 0,
        kwargs: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Run a function once after a delay

        Args:
            kind: job kind (auto-verify, auto-assign, notify)
            key: job key, usually the case ID
            func: module-level callable (must be importable for durable stores)
            delay_seconds: delay before running
            kwargs: keyword arguments for the function

        Returns:
            job ID
        """
        identifier = job_id(kind, key)

        if not self.running:
            # Start lazily so scripts and workers can schedule without the API
            self.start()

        run_date = datetime.utcnow() + timedelta(seconds=delay_seconds)
        self.scheduler.add_job(
            func,
            trigger=DateTrigger(run_date=run_date, timezone="UTC"),
            id=identifier,
            kwargs=kwargs or {},
            replace_existing=True,
            max_instances=1,
            misfire_grace_time=60,
        )
        logger.debug(f"Job scheduled: {identifier} in {delay_seconds}s")
        return identifier


# Global job scheduler instance
job_scheduler = JobScheduler()
