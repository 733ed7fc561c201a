import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class ProductPagination(PageNumberPagination):
    page_size = 10
    page_query_param = "page"
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data):
        total = self.page.paginator.count
        page_size = self.page.paginator.per_page
        return Response(
            {
                "products": data,
                "pagination": {
                    "totalProducts": total,
                    "totalPages": math.ceil(total / page_size) if page_size else 0,
                    "currentPage": self.page.number,
                    "pageSize": page_size,
                },
            }
        )
