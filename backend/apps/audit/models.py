from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class AuditLog(models.Model):
    """One row per state-changing API action (order created, dispatched, return processed...)."""

    timestamp = models.DateTimeField(auto_now_add=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    entity_type = models.CharField(max_length=255, help_text="Type of entity affected (e.g., 'SalesOrder', 'Invoice')")
    entity_id = models.CharField(max_length=255, help_text="ID of the entity affected")
    action = models.CharField(max_length=50, help_text="Action code, e.g. SO_CREATED, INVOICE_PAID")
    description = models.TextField(blank=True, help_text="A brief description of the action")
    before_value = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder, help_text="JSON representation of the object before the change")
    after_value = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder, help_text="JSON representation of the object after the change")

    class Meta:
        ordering = ['-timestamp']
        verbose_name = "Audit Log"
        verbose_name_plural = "Audit Logs"
        indexes = [
            models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx"),
        ]

    def __str__(self):
        return f"{self.timestamp}: {self.user} {self.action} {self.entity_type}:{self.entity_id}"
