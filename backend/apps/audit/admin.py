from django.contrib import admin
from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "user", "action", "entity_type", "entity_id")
    list_filter = ("action", "entity_type")
    search_fields = ("entity_type", "entity_id", "description", "user__username", "user__email")
    readonly_fields = ("timestamp", "user", "action", "entity_type", "entity_id", "description", "before_value", "after_value")
