from __future__ import annotations

import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from .config import default_page_size, max_page_size


class DocumentPagination(PageNumberPagination):
    """
    ``page``/``limit`` pagination whose envelope matches the dashboard contract:

        {"<results_key>": [...], "currentPage": 1, "totalPages": 3, "<total_key>": 120}

    Views name the keys through ``results_key`` and ``total_key`` attributes.
    """

    page_size_query_param = "limit"

    def __init__(self):
        self.page_size = default_page_size()
        self.max_page_size = max_page_size()

    def paginate_queryset(self, queryset, request, view=None):
        self.view = view
        return super().paginate_queryset(queryset, request, view=view)

    def get_paginated_response(self, data):
        total = self.page.paginator.count
        per_page = self.page.paginator.per_page
        return Response({
            getattr(self.view, "results_key", "results"): data,
            "currentPage": self.page.number,
            "totalPages": math.ceil(total / per_page) if per_page else 0,
            getattr(self.view, "total_key", "total"): total,
        })
