import logging
from django.db.models import Prefetch, Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from userauth.apis.views.views import SecuredView
from capsules.models import Capsule, MemoryEntry
from capsules.apis.serializers.capsule import (
    CapsuleCreationSerializer, CapsuleSerializer, MemoryEntryCreationSerializer, MemoryEntrySerializer,
)

logger = logging.getLogger(__name__)


def visible_capsules(user):
    """Capsules the user created or is a member of."""
    return (
        Capsule.objects.filter(Q(created_by=user) | Q(members=user), is_deleted=False)
        .distinct()
        .select_related('created_by')
        .prefetch_related('members', Prefetch('entries', queryset=MemoryEntry.objects.order_by('created_at', 'id')))
    )


class CapsuleListCreateView(SecuredView):
    """
    API view to create a capsule or list the current user's capsules.
    """

    def post(self, request, format=None):
        logger.info("CapsuleListCreateView.post called")
        user = self.get_current_user(request)
        serializer = CapsuleCreationSerializer(data=request.data, context={'user': user})
        serializer.is_valid(raise_exception=True)
        capsule = serializer.save()
        capsule = visible_capsules(user).get(pk=capsule.pk)
        return Response({
            'message': 'Capsule created',
            'capsule': CapsuleSerializer(capsule).data,
        }, status=status.HTTP_201_CREATED)

    def get(self, request, format=None):
        logger.info("CapsuleListCreateView.get list called")
        user = self.get_current_user(request)
        capsules = visible_capsules(user).order_by('-created_at', '-id')
        return Response(CapsuleSerializer(capsules, many=True).data)


class CapsuleDetailView(SecuredView):
    def get(self, request, capsule_id, format=None):
        logger.info(f"CapsuleDetailView.get called for capsule id: {capsule_id}")
        user = self.get_current_user(request)
        capsule = get_object_or_404(visible_capsules(user), pk=capsule_id)
        return Response(CapsuleSerializer(capsule).data)


class CapsuleEntryCreateView(SecuredView):
    """
    Adds a memory entry to a collaborative capsule. Only the creator and
    members may add entries.
    """

    def post(self, request, capsule_id, format=None):
        logger.info(f"CapsuleEntryCreateView.post called for capsule id: {capsule_id}")
        user = self.get_current_user(request)
        capsule = get_object_or_404(Capsule, pk=capsule_id, is_deleted=False)
        if not capsule.has_access(user):
            raise PermissionDenied("You are not a member of this capsule")

        serializer = MemoryEntryCreationSerializer(data=request.data, context={'user': user, 'capsule': capsule})
        serializer.is_valid(raise_exception=True)
        entry = serializer.save()
        return Response({
            'message': 'Entry added to capsule',
            'entry': MemoryEntrySerializer(entry).data,
        }, status=status.HTTP_201_CREATED)
