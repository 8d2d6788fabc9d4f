from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from shared.exceptions import DomainError

logger = logging.getLogger(__name__)


def domain_exception_handler(exc, context):
    """Render domain errors as ``{"detail", "error"}`` and defer everything else to DRF."""
    if isinstance(exc, DomainError):
        view = context.get("view")
        logger.info(
            f"{exc.__class__.__name__} raised in {view.__class__.__name__ if view else 'unknown view'}: {exc}"
        )
        return Response(
            {"detail": str(exc), "error": exc.__class__.__name__},
            status=exc.status_code,
        )
    return exception_handler(exc, context)
