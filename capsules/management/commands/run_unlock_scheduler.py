import logging
import signal
import threading

from django.core.management.base import BaseCommand

from capsules.scheduler import UnlockScheduler

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Run the capsule unlock scheduler in the foreground (for deployments without Celery beat)."

    def add_arguments(self, parser):
        parser.add_argument(
            '--interval',
            type=int,
            default=None,
            help="Seconds between cycles, defaults to CAPSULE_UNLOCK_INTERVAL_SECONDS.",
        )
        parser.add_argument(
            '--once',
            action='store_true',
            help="Run a single cycle and exit.",
        )

    def handle(self, *args, **options):
        scheduler = UnlockScheduler(interval=options['interval'])

        if options['once']:
            report = scheduler.tick()
            if report is not None:
                self.stdout.write(
                    f"{report.capsules_notified} capsules and {report.entries_notified} entries notified, "
                    f"{report.sends_failed}/{report.sends_attempted} sends failed"
                )
            return

        stopped = threading.Event()

        def request_stop(signum, frame):
            logger.info("Received signal %s, stopping capsule unlock scheduler", signum)
            stopped.set()

        signal.signal(signal.SIGINT, request_stop)
        signal.signal(signal.SIGTERM, request_stop)

        scheduler.start()
        self.stdout.write(self.style.SUCCESS(f"Capsule unlock scheduler running every {scheduler.interval}s"))
        try:
            stopped.wait()
        finally:
            scheduler.stop()
