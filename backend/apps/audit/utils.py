from __future__ import annotations

from typing import Any, Dict, Optional

from .models import AuditLog


def log_audit_event(
    *,
    user,
    action: str,
    entity_type: str,
    entity_id,
    description: str = "",
    before: Optional[Dict[str, Any]] = None,
    after: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Persist an audit log entry. Anonymous users are stored as NULL."""
    if user is not None and not getattr(user, "is_authenticated", False):
        user = None
    return AuditLog.objects.create(
        user=user,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        description=description,
        before_value=before,
        after_value=after,
    )
