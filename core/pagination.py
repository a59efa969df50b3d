"""
Core — Pagination

Page-number paginator. Accepts ``limit`` (or ``page_size``) with a hard cap
and reports page totals in the response meta.

@file core/pagination.py
"""

from collections import OrderedDict

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


class StandardPagination(PageNumberPagination):
    page_size = DEFAULT_PAGE_SIZE
    page_size_query_params = ('limit', 'page_size')
    max_page_size = MAX_PAGE_SIZE

    def get_page_size(self, request):
        for param in self.page_size_query_params:
            raw = request.query_params.get(param)
            if not raw:
                continue
            try:
                size = int(raw)
            except (TypeError, ValueError):
                return self.page_size
            if size <= 0:
                return self.page_size
            return min(size, self.max_page_size)
        return self.page_size

    def get_paginated_response(self, data):
        return Response(OrderedDict([
            ('count', self.page.paginator.count),
            ('next', self.get_next_link()),
            ('previous', self.get_previous_link()),
            ('page', self.page.number),
            ('total_pages', self.page.paginator.num_pages),
            ('page_size', self.page.paginator.per_page),
            ('results', data),
        ]))
