from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    """
    Abstract base model that adds creation/update timestamps and the
    creating user to every business document.
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
    )

    class Meta:
        abstract = True
