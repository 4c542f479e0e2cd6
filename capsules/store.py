import logging
from django.db.models import Prefetch

from capsules.models import Capsule, CapsuleType, MemoryEntry

logger = logging.getLogger(__name__)


class CapsuleStore:
    """
    Data access used by the unlock job.

    Reads always go to the database; nothing is cached between calls. Flag
    writes are conditional single statements (``... WHERE notified = false``)
    so two writers racing on the same row can not both report a transition.
    """

    def find_many(self, **predicate):
        return list(Capsule.objects.filter(is_deleted=False, **predicate))

    def update_by_id(self, capsule_id, **fields):
        if 'notified' in fields:
            raise ValueError("notified is only written by mark_capsule_notified")
        return Capsule.objects.filter(pk=capsule_id).update(**fields) > 0

    def personal_candidates(self, now):
        return list(
            Capsule.objects.filter(
                type=CapsuleType.PERSONAL,
                lock_date__isnull=False,
                lock_date__lte=now,
                notified=False,
                is_deleted=False,
            ).select_related('created_by')
        )

    def collaborative_candidates(self):
        entries = MemoryEntry.objects.filter(is_deleted=False).order_by('created_at', 'id')
        return list(
            Capsule.objects.filter(
                type=CapsuleType.COLLABORATIVE,
                is_deleted=False,
                entries__isnull=False,
                entries__is_deleted=False,
            )
            .distinct()
            .select_related('created_by')
            .prefetch_related(Prefetch('entries', queryset=entries), 'members')
        )

    def mark_capsule_notified(self, capsule_id):
        """Flip one capsule's flag; returns False when it was already set."""
        updated = Capsule.objects.filter(pk=capsule_id, notified=False).update(notified=True)
        return updated > 0

    def mark_entries_notified(self, capsule_id, entry_ids):
        """Flip the flag of several entries of one capsule in a single write."""
        if not entry_ids:
            return 0
        return MemoryEntry.objects.filter(
            capsule_id=capsule_id,
            pk__in=list(entry_ids),
            notified=False,
        ).update(notified=True)
