from rest_framework import serializers
from django.db import transaction
from userauth.models import User
from capsules.models import Capsule, CapsuleType, MemoryEntry
import logging
logger = logging.getLogger(__name__)


class MediaSerializer(serializers.Serializer):
    url = serializers.CharField(max_length=2048)
    type = serializers.CharField(max_length=255)


class MediaListField(serializers.ListField):
    """Accepts a single ``{url, type}`` object or a list of them."""
    child = MediaSerializer()

    def to_internal_value(self, data):
        if isinstance(data, dict):
            data = [data]
        return [dict(item) for item in super().to_internal_value(data)]


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'email']


class MemoryEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = MemoryEntry
        fields = ['id', 'content', 'media', 'lock_date', 'created_by', 'member_name', 'notified', 'created_at']
        read_only_fields = fields


class CapsuleSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)
    members = UserSummarySerializer(many=True, read_only=True)
    entries = serializers.SerializerMethodField()

    class Meta:
        model = Capsule
        fields = [
            'id', 'title', 'description', 'content', 'media', 'lock_date', 'type',
            'created_by', 'members', 'member_details', 'notified', 'entries', 'created_at',
        ]
        read_only_fields = fields

    def get_entries(self, obj):
        entries = [entry for entry in obj.entries.all() if not entry.is_deleted]
        return MemoryEntrySerializer(entries, many=True).data


class CapsuleCreationSerializer(serializers.Serializer):
    """
    Creates personal or collaborative capsules.

    Member emails that do not belong to a registered user are ignored. The
    creator is always a member of a collaborative capsule, and the member
    names and emails are snapshotted into ``member_details``.
    """
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    content = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    media = MediaListField(required=False, default=list)
    lock_date = serializers.DateTimeField(required=False, allow_null=True, default=None)
    type = serializers.ChoiceField(choices=CapsuleType.choices, default=CapsuleType.PERSONAL)
    member_emails = serializers.ListField(child=serializers.EmailField(), required=False, default=list)

    def _resolve_members(self, emails, creator):
        members = [creator]
        seen = {creator.email.lower()}
        for email in emails:
            email = email.lower()
            if email in seen:
                continue
            seen.add(email)
            user = User.objects.filter(email__iexact=email).first()
            if user is None:
                logger.info("Ignoring unknown member email for capsule creation")
                continue
            members.append(user)
        return members

    @transaction.atomic
    def create(self, validated_data):
        user = self.context['user']
        member_emails = validated_data.pop('member_emails', [])
        capsule = Capsule.objects.create(created_by=user, **validated_data)

        if capsule.is_collaborative:
            members = self._resolve_members(member_emails, user)
            capsule.members.set(members)
            capsule.member_details = [{'name': member.name, 'email': member.email} for member in members]
            capsule.save(update_fields=['member_details', 'updated_at'])

        logger.info(f'Capsule created id: {capsule.pk} type: {capsule.type}')
        return capsule


class MemoryEntryCreationSerializer(serializers.Serializer):
    content = serializers.CharField()
    media = MediaListField(required=False, default=list)
    lock_date = serializers.DateTimeField(required=False, allow_null=True, default=None)

    def validate(self, attrs):
        capsule = self.context['capsule']
        if not capsule.is_collaborative:
            raise serializers.ValidationError({'capsule': 'Memory entries can only be added to collaborative capsules.'})
        return attrs

    def create(self, validated_data):
        user = self.context['user']
        capsule = self.context['capsule']
        entry = MemoryEntry.objects.create(
            capsule=capsule,
            created_by=user,
            member_name=user.name,
            **validated_data,
        )
        logger.info(f'Memory entry {entry.pk} added to capsule id: {capsule.pk}')
        return entry
