# utils/pagination.py
import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from config.constants import BUSINESS_PAGE_SIZE


def request_generation(request):
    """Opaque tag a client sends with a list request; echoed back unchanged."""
    return request.query_params.get("generation")


class DashboardPagination(PageNumberPagination):
    """Offset pagination with a fixed page size and a computed page total."""

    page_size = BUSINESS_PAGE_SIZE
    page_query_param = "page"

    def get_total_pages(self, count):
        return max(1, math.ceil(count / self.page_size))

    def get_paginated_response(self, data):
        count = self.page.paginator.count
        return Response({
            "count": count,
            "page": self.page.number,
            "total_pages": self.get_total_pages(count),
            "generation": request_generation(self.request),
            "results": data,
        })
