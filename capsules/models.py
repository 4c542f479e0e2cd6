from django.db import models
from userauth.models import User


class BaseModel(models.Model):
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name="Updated At"
    )
    is_deleted = models.BooleanField(
        default=False,
        verbose_name="Is Deleted"
    )

    class Meta:
        abstract = True


class UnlockableModel(BaseModel):
    """
    Shared shape of everything the unlock job can notify about.

    ``notified`` is owned by the unlock job: it is written only through the
    conditional updates in ``capsules.store``. A plain ``save()`` of an
    existing row leaves the column untouched so a stale in-memory ``False``
    never overwrites a persisted ``True``.
    """
    lock_date = models.DateTimeField(
        blank=True,
        null=True,
        verbose_name="Lock Date"
    )
    notified = models.BooleanField(
        default=False,
        verbose_name="Notified"
    )

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding and kwargs.get('update_fields') is None:
            kwargs['update_fields'] = [
                field.name for field in self._meta.concrete_fields
                if not field.primary_key and field.name != 'notified'
            ]
        super().save(*args, **kwargs)

    def is_unlocked(self, now):
        return self.lock_date is not None and self.lock_date <= now


class CapsuleType(models.TextChoices):
    PERSONAL = "personal", "Personal"
    COLLABORATIVE = "collaborative", "Collaborative"


class Capsule(UnlockableModel):
    title = models.CharField(max_length=255, verbose_name="Title")
    description = models.TextField(blank=True, null=True, verbose_name="Description")
    content = models.TextField(blank=True, null=True, verbose_name="Content")
    # ordered [{"url": ..., "type": ...}] references produced by the uploader
    media = models.JSONField(default=list, blank=True, verbose_name="Media")
    type = models.CharField(
        max_length=20,
        choices=CapsuleType.choices,
        default=CapsuleType.PERSONAL,
        verbose_name="Capsule Type"
    )
    created_by = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="capsules",
        verbose_name="Creator"
    )
    members = models.ManyToManyField(
        User,
        blank=True,
        related_name="shared_capsules",
        verbose_name="Members"
    )
    # [{"name": ..., "email": ...}] captured when the capsule is created
    member_details = models.JSONField(default=list, blank=True, verbose_name="Member Details")

    class Meta:
        verbose_name = "Capsule"
        verbose_name_plural = "Capsules"
        ordering = ('-created_at', '-id')
        indexes = [
            models.Index(fields=['type', 'notified', 'lock_date'], name='capsule_unlock_idx'),
        ]

    def __str__(self):
        return f'{self.title} ({self.type}) id: {self.pk}'

    @property
    def is_personal(self):
        return self.type == CapsuleType.PERSONAL

    @property
    def is_collaborative(self):
        return self.type == CapsuleType.COLLABORATIVE

    def has_access(self, user):
        if self.created_by_id == user.pk:
            return True
        return self.members.filter(pk=user.pk).exists()


class MemoryEntry(UnlockableModel):
    capsule = models.ForeignKey(
        Capsule,
        on_delete=models.CASCADE,
        related_name="entries",
        verbose_name="Capsule"
    )
    content = models.TextField(verbose_name="Content")
    media = models.JSONField(default=list, blank=True, verbose_name="Media")
    created_by = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        related_name="memory_entries",
        verbose_name="Author"
    )
    member_name = models.CharField(max_length=150, verbose_name="Member Name")

    class Meta:
        verbose_name = "Memory Entry"
        verbose_name_plural = "Memory Entries"
        ordering = ('created_at', 'id')

    def __str__(self):
        return f'Entry by {self.member_name} in capsule id: {self.capsule_id}'
