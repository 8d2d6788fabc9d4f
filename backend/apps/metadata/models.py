from django.db import models


class DocumentSequence(models.Model):
    """
    Monotonic counter per document type.

    Backs order, invoice and return numbers (``SO-000001``) as well as the bare
    integer indent and purchase order numbers. Rows are advanced under
    ``select_for_update`` by ``core.doc_numbers``.
    """

    doc_type = models.CharField(max_length=20, unique=True, help_text="Short document code, e.g., SO, INV, SR, INDENT, PO")
    current_value = models.PositiveBigIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["doc_type"]

    def __str__(self):
        return f"{self.doc_type}: {self.current_value}"
