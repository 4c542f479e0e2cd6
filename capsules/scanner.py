import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


def is_eligible(item, now):
    """Capsules and entries share one rule: lock date reached and not yet notified."""
    return item.is_unlocked(now) and not item.notified


def eligible_entries(capsule, now):
    return [entry for entry in capsule.entries.all() if is_eligible(entry, now)]


@dataclass
class ScanResult:
    personal: list = field(default_factory=list)
    collaborative: list = field(default_factory=list)


class UnlockScanner:
    """Read-only pass over the store producing this tick's candidates."""

    def __init__(self, store):
        self.store = store

    def scan_personal(self, now):
        capsules = self.store.personal_candidates(now)
        # stores may return a superset of due capsules
        return [capsule for capsule in capsules if is_eligible(capsule, now)]

    def scan_collaborative(self, now):
        return [capsule for capsule in self.store.collaborative_candidates() if capsule.entries.all()]

    def scan(self, now):
        result = ScanResult(
            personal=self.scan_personal(now),
            collaborative=self.scan_collaborative(now),
        )
        logger.debug(
            "Unlock scan found %s personal and %s collaborative candidates",
            len(result.personal), len(result.collaborative),
        )
        return result
