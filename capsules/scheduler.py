import logging
import threading

from django.conf import settings
from django.db import close_old_connections
from django.utils import timezone

from capsules.notification_service import DispatchReport, NotificationDispatcher
from capsules.notifier import EmailNotifier
from capsules.scanner import UnlockScanner
from capsules.store import CapsuleStore

logger = logging.getLogger(__name__)


class UnlockScheduler:
    """
    Runs scan-and-notify cycles on a fixed interval.

    Store, notifier and clock are injected so a cycle can be driven
    deterministically with ``run_cycle()``. ``start()``/``stop()`` manage a
    background thread for running the job outside Celery beat. At most one
    cycle runs at a time per scheduler; a tick arriving while a cycle is in
    flight is skipped.
    """

    def __init__(self, store=None, notifier=None, clock=None, interval=None):
        self.store = store or CapsuleStore()
        self.notifier = notifier or EmailNotifier()
        self.clock = clock or timezone.now
        self.interval = interval if interval is not None else settings.CAPSULE_UNLOCK_INTERVAL_SECONDS
        self.scanner = UnlockScanner(self.store)
        self.dispatcher = NotificationDispatcher(self.store, self.notifier)

        self._cycle_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread = None

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def run_personal(self, now):
        report = DispatchReport()
        for capsule in self.scanner.scan_personal(now):
            try:
                report.merge(self.dispatcher.dispatch_personal(capsule))
            except Exception:
                logger.exception("Error notifying personal capsule id: %s", capsule.pk)
        return report

    def run_collaborative(self, now):
        report = DispatchReport()
        for capsule in self.scanner.scan_collaborative(now):
            try:
                report.merge(self.dispatcher.dispatch_collaborative(capsule, now))
            except Exception:
                logger.exception("Error notifying collaborative capsule id: %s", capsule.pk)
        return report

    def run_cycle(self):
        """
        Run one full cycle unless another is in flight.

        Returns the cycle's ``DispatchReport``, or ``None`` when skipped.
        """
        if not self._cycle_lock.acquire(blocking=False):
            logger.warning("Previous capsule unlock cycle still running, skipping tick")
            return None
        try:
            now = self.clock()
            report = DispatchReport()
            # the two passes touch disjoint items; a failing scan of one must not skip the other
            for name, run in (("personal", self.run_personal), ("collaborative", self.run_collaborative)):
                try:
                    report.merge(run(now))
                except Exception:
                    logger.exception("Error in %s capsule unlock pass", name)
            return report
        finally:
            self._cycle_lock.release()

    def tick(self):
        logger.info("Running capsule unlock check job...")
        try:
            report = self.run_cycle()
        except Exception:
            logger.exception("Capsule unlock cycle failed")
            return None
        if report is not None:
            logger.info(
                "Capsule unlock cycle done: %s capsules, %s entries notified, %s/%s sends failed",
                report.capsules_notified, report.entries_notified,
                report.sends_failed, report.sends_attempted,
            )
        return report

    def _loop(self):
        try:
            while not self._stop_event.is_set():
                self.tick()
                close_old_connections()
                self._stop_event.wait(self.interval)
        finally:
            close_old_connections()

    def start(self):
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="capsule-unlock-scheduler", daemon=True)
        self._thread.start()
        logger.info("Capsule unlock scheduler started, interval %ss", self.interval)

    def stop(self, timeout=None):
        """Stop ticking; a cycle already in flight is allowed to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if not self._thread.is_alive():
                self._thread = None
        logger.info("Capsule unlock scheduler stopped")
