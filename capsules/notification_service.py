import logging
from dataclasses import dataclass

from django.db import DatabaseError

from capsules.notification_message import build_message, capsule_link
from capsules.scanner import eligible_entries

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipient:
    name: str
    email: str


def resolve_recipients(capsule):
    """
    Who hears about an unlock in ``capsule``.

    Personal capsules notify their creator. Collaborative capsules use the
    ``member_details`` snapshot taken at creation, falling back to the live
    ``members`` only when no snapshot exists. Recipients without an email
    are dropped.
    """
    if capsule.is_personal:
        creator = capsule.created_by
        candidates = [(creator.name, creator.email)] if creator else []
    elif capsule.member_details:
        candidates = [(detail.get('name') or '', detail.get('email')) for detail in capsule.member_details]
    else:
        candidates = [(member.name, member.email) for member in capsule.members.all()]

    recipients = []
    for name, email in candidates:
        if not email:
            logger.warning("Skipping recipient without email for capsule id: %s", capsule.pk)
            continue
        recipients.append(Recipient(name=name, email=email))
    return recipients


@dataclass
class DispatchReport:
    capsules_notified: int = 0
    entries_notified: int = 0
    sends_attempted: int = 0
    sends_failed: int = 0
    write_failures: int = 0

    def merge(self, other):
        self.capsules_notified += other.capsules_notified
        self.entries_notified += other.entries_notified
        self.sends_attempted += other.sends_attempted
        self.sends_failed += other.sends_failed
        self.write_failures += other.write_failures
        return self


class NotificationDispatcher:
    """
    Sends unlock notifications and writes the ``notified`` flag back.

    Every send for an item finishes before its flag is written. A failed
    send never blocks the flag; a failed flag write leaves the item
    eligible for the next tick.
    """

    def __init__(self, store, notifier):
        self.store = store
        self.notifier = notifier

    def _send(self, recipient, subject, body, report):
        report.sends_attempted += 1
        try:
            delivered = self.notifier.send(recipient.email, subject, body)
        except Exception as e:
            logger.error(
                "Notifier raised while sending unlock notification",
                extra={"recipient": recipient.email, "error": str(e)},
                exc_info=True,
            )
            delivered = False
        if not delivered:
            report.sends_failed += 1
            logger.warning("Unlock notification to %s failed", recipient.email)
        return delivered

    def dispatch_personal(self, capsule):
        report = DispatchReport()
        recipients = resolve_recipients(capsule)
        if not recipients:
            logger.warning("No recipients for personal capsule id: %s, marking notified", capsule.pk)

        for recipient in recipients:
            subject, body = build_message(
                'personal_capsule_unlocked',
                name=recipient.name,
                title=capsule.title,
                link=capsule_link(capsule),
            )
            self._send(recipient, subject, body, report)

        try:
            marked = self.store.mark_capsule_notified(capsule.pk)
        except DatabaseError:
            report.write_failures += 1
            logger.exception("Failed to mark personal capsule id: %s notified, will retry next tick", capsule.pk)
            return report

        if marked:
            report.capsules_notified += 1
            logger.info('Notified personal capsule creator for capsule "%s"', capsule.title)
        else:
            logger.info("Personal capsule id: %s was already marked notified", capsule.pk)
        return report

    def dispatch_collaborative(self, capsule, now):
        report = DispatchReport()
        entries = eligible_entries(capsule, now)
        if not entries:
            return report

        recipients = resolve_recipients(capsule)
        if not recipients:
            logger.warning("No recipients for collaborative capsule id: %s, marking entries notified", capsule.pk)

        for entry in entries:
            for recipient in recipients:
                subject, body = build_message(
                    'collaborative_memory_unlocked',
                    name=recipient.name,
                    author=entry.member_name,
                    title=capsule.title,
                    link=capsule_link(capsule),
                )
                self._send(recipient, subject, body, report)

        entry_ids = [entry.pk for entry in entries]
        try:
            marked = self.store.mark_entries_notified(capsule.pk, entry_ids)
        except DatabaseError:
            report.write_failures += 1
            logger.exception(
                "Failed to mark entries %s of capsule id: %s notified, will retry next tick",
                entry_ids, capsule.pk,
            )
            return report

        report.entries_notified += marked
        logger.info('Notified members for %s unlocked memory entries in capsule "%s"', marked, capsule.title)
        return report
