"""Page-number pagination shared by every list endpoint."""

from __future__ import annotations

from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """``?page=N&page_size=M`` with a hard ceiling on ``page_size``."""

    page_size_query_param = "page_size"
    max_page_size = 100
