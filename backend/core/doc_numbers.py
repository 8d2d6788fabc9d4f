from __future__ import annotations

from django.db import transaction


@transaction.atomic
def get_next_value(*, doc_type: str, start: int = 1) -> int:
    """
    Atomically advance the counter for ``doc_type`` and return the new value.

    The sequence row is locked with SELECT ... FOR UPDATE so concurrent
    creators never observe the same value. The first value handed out is
    ``start``.
    """
    # Lazy import to avoid app loading cycles
    from apps.metadata.models import DocumentSequence  # type: ignore

    seq, _ = (
        DocumentSequence.objects.select_for_update().get_or_create(
            doc_type=doc_type,
            defaults={"current_value": start - 1},
        )
    )
    seq.current_value += 1
    seq.save(update_fields=["current_value", "updated_at"])
    return seq.current_value


def get_next_doc_no(*, doc_type: str, prefix: str | None = None, width: int = 6) -> str:
    """
    Get the next sequential document number for a doc type.

    The format is: {prefix or doc_type}-{SEQUENCE}
    Example: SO-000001
    """
    value = get_next_value(doc_type=doc_type)
    pre = prefix or doc_type
    return f"{pre}-{value:0{width}d}"
