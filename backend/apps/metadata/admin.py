from django.contrib import admin

from .models import DocumentSequence


@admin.register(DocumentSequence)
class DocumentSequenceAdmin(admin.ModelAdmin):
    list_display = ("doc_type", "current_value", "updated_at")
    search_fields = ("doc_type",)
    readonly_fields = ("updated_at",)
