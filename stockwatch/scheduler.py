"""
Periodic execution of the stock automation tasks.

Usage:
    scheduler = Scheduler()          # default tasks on the configured store
    scheduler.start()                # inside a running event loop
    ...
    scheduler.stop()

    await scheduler.run_all_tasks()  # manual / forced run
    await scheduler.run_task('expiry_check')

Each task has its own timer (loop.call_later), re-armed on every firing, so
cadences are independent of each other and of how long a run takes. Runs
on different timers may interleave; a timer firing while the previous run
of the same task is still going is skipped.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from stockwatch.conf import stockwatch_settings
from stockwatch.exceptions import StockwatchError
from stockwatch.services.base import SweepResult

logger = logging.getLogger('stockwatch')

TaskFunc = Callable[[], Awaitable[Any]]

_UNSET = object()


def default_tasks(automation) -> dict[str, TaskFunc]:
    """
    Tasks bound to the uncontained operations, so failures reach the
    scheduler's task boundary instead of being swallowed by Automation.
    """
    return {
        'stock_status': automation.reconciler.run,
        'expiry_check': lambda: automation.expiry.scan(stockwatch_settings.EXPIRY_HORIZON_DAYS),
        'automation': automation.sweep,
        'auto_resolve': lambda: automation.alerts.auto_expire(stockwatch_settings.ALERT_MAX_AGE_DAYS),
        'optimization': automation.advisor.run,
    }


class Scheduler:
    """
    Owns one periodic timer per task.

    Stopped → Running via start(), Running → Stopped via stop(). Instances
    are independent: several schedulers can coexist (e.g. in tests).

    stop() prevents future firings only. Runs already in flight complete.
    Every run is bounded by ``task_timeout`` seconds (None = unbounded).
    """

    def __init__(self, automation=None, tasks: dict[str, TaskFunc] | None = None,
                 intervals: dict[str, float] | None = None, task_timeout=_UNSET):
        if tasks is None:
            if automation is None:
                from stockwatch.automation import Automation
                automation = Automation()
            tasks = default_tasks(automation)

        self.tasks: dict[str, TaskFunc] = dict(tasks)
        self.intervals = {name: self._interval_for(name, intervals or {}) for name in self.tasks}
        self.task_timeout = (
            stockwatch_settings.TASK_TIMEOUT_SECONDS if task_timeout is _UNSET else task_timeout
        )

        self._loop: asyncio.AbstractEventLoop | None = None
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self._state: dict[str, dict[str, Any]] = {
            name: {"last_run": None, "run_count": 0, "last_error": None} for name in self.tasks
        }

    @staticmethod
    def _interval_for(name: str, overrides: dict[str, float]) -> float:
        if name in overrides:
            return overrides[name]
        try:
            return stockwatch_settings.interval_for(name)
        except KeyError:
            raise ValueError(f"No interval configured for task '{name}'") from None

    # ══════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ══════════════════════════════════════════════════════════════

    def start(self) -> None:
        """
        Arm one timer per task. Existing timers are cleared first, so
        calling start() again never duplicates them.

        Must be called from inside a running event loop.
        """
        logger.info("Starting scheduler...")
        self.stop()
        self._loop = asyncio.get_running_loop()
        for name in self.tasks:
            self._arm(name)
        logger.info(
            "Scheduler started successfully",
            extra={"intervals": dict(self.intervals)},
        )

    def stop(self) -> None:
        """Cancel all timers. Safe to call when already stopped."""
        if not self._timers:
            return
        logger.info("Stopping scheduler...")
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        logger.info("Scheduler stopped")

    @property
    def is_running(self) -> bool:
        return bool(self._timers)

    @property
    def pending_timers(self) -> int:
        return sum(1 for handle in self._timers.values() if not handle.cancelled())

    def _arm(self, name: str) -> None:
        self._timers[name] = self._loop.call_later(self.intervals[name], self._fire, name)

    def _fire(self, name: str) -> None:
        self._arm(name)

        previous = self._inflight.get(name)
        if previous is not None and not previous.done():
            logger.warning("stockwatch.scheduler.skipped", extra={"task": name})
            return
        self._inflight[name] = self._loop.create_task(self.run_task(name))

    # ══════════════════════════════════════════════════════════════
    # EXECUTION
    # ══════════════════════════════════════════════════════════════

    async def run_task(self, name: str) -> bool:
        """
        Run one task by name. Never raises.

        Returns:
            True if the task completed, False if it failed, timed out
            or is unknown
        """
        func = self.tasks.get(name)
        if func is None:
            logger.error("%s", StockwatchError('UNKNOWN_TASK', task=name), extra={"task": name})
            return False

        logger.info("Running task: %s...", name)
        state = self._state[name]
        state["last_run"] = datetime.now(timezone.utc)
        state["run_count"] += 1

        try:
            if self.task_timeout is None:
                result = await func()
            else:
                result = await asyncio.wait_for(func(), timeout=self.task_timeout)
        except asyncio.TimeoutError:
            error = StockwatchError('TASK_TIMEOUT', task=name, timeout=self.task_timeout)
            state["last_error"] = str(error)
            logger.error("%s", error, extra={"task": name, "timeout": self.task_timeout})
            return False
        except Exception as e:
            state["last_error"] = str(e)
            logger.exception("Error running task %s", name)
            return False

        # A sweep that skipped entities did not complete
        if isinstance(result, SweepResult) and not result.ok:
            error = StockwatchError('PARTIAL_FAILURE', task=name, failed=result.failed)
            state["last_error"] = str(error)
            logger.error("%s", error, extra={"task": name, "failed": result.failed})
            return False

        state["last_error"] = None
        logger.info("Task %s completed successfully", name)
        return True

    async def run_all_tasks(self) -> dict[str, bool]:
        """
        Run every task once, sequentially, regardless of timer state.
        A failing task does not stop the ones after it.
        """
        logger.info("Running all scheduled tasks...")
        results = {}
        for name in self.tasks:
            results[name] = await self.run_task(name)

        failed = [name for name, ok in results.items() if not ok]
        if failed:
            logger.warning("stockwatch.scheduler.run_all_partial", extra={"failed": failed})
        else:
            logger.info("All tasks completed successfully")
        return results

    def get_status(self) -> dict[str, Any]:
        return {
            name: {
                "last_run": state["last_run"].isoformat() if state["last_run"] else None,
                "interval_seconds": self.intervals[name],
                "run_count": state["run_count"],
                "last_error": state["last_error"],
                "armed": name in self._timers,
            }
            for name, state in self._state.items()
        }
