"""
APScheduler Service
Handles background housekeeping of verification codes and auth tokens
"""
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from cleanlab.config import settings
from cleanlab.database import SessionLocal
from cleanlab.errors import CleanLabError
from cleanlab.logger import logger
from cleanlab.services.auth_service import purge_expired


class SchedulerService:
    """Service to manage background scheduler tasks"""

    def __init__(self, session_factory=SessionLocal):
        self.session_factory = session_factory
        self.scheduler = BackgroundScheduler()
        self._setup_jobs()

    def _setup_jobs(self):
        """Setup all background jobs"""
        self.scheduler.add_job(
            self._purge_expired_credentials,
            IntervalTrigger(minutes=settings.cleanup_interval_minutes),
            id="purge_expired_credentials",
            name="Clear expired verification codes and tokens",
            replace_existing=True
        )

    def _purge_expired_credentials(self):
        """Clear verification codes past their expiry and delete stale tokens"""
        db = self.session_factory()
        try:
            codes_cleared, tokens_removed = purge_expired(db)
            if codes_cleared or tokens_removed:
                logger.info(f"Purged {codes_cleared} expired codes and {tokens_removed} expired tokens")
        except CleanLabError as e:
            logger.error(f"Error in purge job: {e.message}")
        finally:
            db.close()

    def start(self):
        """Start the scheduler"""
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Scheduler started")

    def stop(self):
        """Stop the scheduler"""
        if self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Scheduler stopped")


# Global scheduler instance
_scheduler_service = None


def get_scheduler() -> SchedulerService:
    """Get or create scheduler instance"""
    global _scheduler_service
    if _scheduler_service is None:
        _scheduler_service = SchedulerService()
    return _scheduler_service


def start_scheduler():
    """Start the background scheduler"""
    get_scheduler().start()


def stop_scheduler():
    """Stop the background scheduler"""
    get_scheduler().stop()
