"""Timer trigger for periodic sweeps."""
import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .errors import StoreFailure
from .services.monitor import Monitor

logger = structlog.get_logger(__name__)

SWEEP_JOB_ID = "uptime-sweep"

def cron_trigger(expression: str) -> CronTrigger:
    """5-field cron ("minute hour day month day_of_week") -> CronTrigger."""
    parts = expression.split()
    if len(parts) != 5:
        raise ValueError(f"Invalid cron expression: {expression}")
    return CronTrigger(
        minute=parts[0],
        hour=parts[1],
        day=parts[2],
        month=parts[3],
        day_of_week=parts[4],
    )

async def run_scheduled_sweep(monitor: Monitor) -> None:
    try:
        await monitor.sweep()
    except StoreFailure as ex:
        logger.error("scheduled_sweep_failed", error=str(ex))

class SweepScheduler:
    def __init__(self, monitor: Monitor, cron_expression: str):
        self.monitor = monitor
        self.trigger = cron_trigger(cron_expression)
        self.scheduler = AsyncIOScheduler()
        self.running = False

    def start(self) -> None:
        if self.running:
            logger.warning("Scheduler already running")
            return
        self.scheduler.add_job(
            run_scheduled_sweep,
            trigger=self.trigger,
            args=(self.monitor,),
            id=SWEEP_JOB_ID,
            name="uptime sweep",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self.scheduler.start()
        self.running = True
        logger.info("scheduler_started", job_id=SWEEP_JOB_ID, trigger=str(self.trigger))

    def stop(self) -> None:
        if not self.running:
            return
        self.scheduler.shutdown(wait=False)
        self.running = False
        logger.info("scheduler_stopped")
