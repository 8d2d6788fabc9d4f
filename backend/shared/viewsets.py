from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from apps.audit.utils import log_audit_event

from .pagination import DocumentPagination


class AuditedModelViewSet(viewsets.ModelViewSet):
    """
    CRUD viewset for master data.

    Stamps ``created_by`` on create and writes one audit entry per change,
    using ``entity_type`` for the entry and ``<ENTITY_TYPE>_CREATED`` style
    action codes.
    """

    permission_classes = [IsAuthenticated]
    pagination_class = DocumentPagination
    lookup_value_regex = r"\d+"
    entity_type = None

    def _audit(self, action, entity_id, before=None, after=None):
        log_audit_event(
            user=self.request.user,
            action=f"{self.entity_type.upper()}_{action}",
            entity_type=self.entity_type,
            entity_id=entity_id,
            before=before,
            after=after,
        )

    def perform_create(self, serializer):
        instance = serializer.save(created_by=self.request.user)
        self._audit("CREATED", instance.pk, after=serializer.data)

    def perform_update(self, serializer):
        before = self.get_serializer(serializer.instance).data
        instance = serializer.save()
        self._audit("UPDATED", instance.pk, before=before, after=serializer.data)

    def perform_destroy(self, instance):
        entity_id = instance.pk
        instance.delete()
        self._audit("DELETED", entity_id)
