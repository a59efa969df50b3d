"""
Core — Exception handler, renderer and pagination tests.

@file core/tests/test_exceptions.py
"""

import json

import pytest
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.http import Http404
from rest_framework import serializers
from rest_framework.response import Response
from rest_framework.test import APIRequestFactory

from core.exceptions import (
    AlreadyDistributedToday,
    BatchIdGenerationExhausted,
    BulkCreateFailed,
    standard_exception_handler,
)
from core.pagination import StandardPagination
from core.renderers import StandardJSONRenderer


def _handle(exc):
    return standard_exception_handler(exc, {})


class TestStandardExceptionHandler:

    def test_domain_exception(self):
        resp = _handle(AlreadyDistributedToday())
        assert resp.status_code == 400
        assert resp.data['status'] == 'error'
        assert resp.data['code'] == 'ALREADY_DISTRIBUTED_TODAY'
        assert resp.data['message'] == 'Student has already received a pad today.'

    def test_generation_exhausted_is_500(self):
        resp = _handle(BatchIdGenerationExhausted())
        assert resp.status_code == 500
        assert resp.data['code'] == 'BATCH_ID_EXHAUSTED'

    def test_http404(self):
        resp = _handle(Http404())
        assert resp.status_code == 404
        assert resp.data['code'] == 'RESOURCE_NOT_FOUND'

    def test_integrity_error_is_conflict(self):
        resp = _handle(IntegrityError('UNIQUE constraint failed'))
        assert resp.status_code == 409
        assert resp.data['code'] == 'DUPLICATE_RESOURCE'

    def test_django_validation_error(self):
        resp = _handle(DjangoValidationError({'quantity_supplied': ['Must be at least 1.']}))
        assert resp.status_code == 400
        assert resp.data['code'] == 'VALIDATION_ERROR'
        assert resp.data['message'] == 'quantity_supplied: Must be at least 1.'

    def test_drf_validation_error(self):
        resp = _handle(serializers.ValidationError({'staff_id': ['This field is required.']}))
        assert resp.status_code == 400
        assert resp.data['code'] == 'VALIDATION_ERROR'
        assert resp.data['errors'] == {'staff_id': ['This field is required.']}

    def test_bulk_failure_carries_item_errors(self):
        resp = _handle(BulkCreateFailed(item_errors=[{'index': 1, 'error': 'bad'}]))
        assert resp.status_code == 400
        assert resp.data['errors']['items'] == [{'index': 1, 'error': 'bad'}]

    def test_unhandled_is_500(self):
        resp = _handle(RuntimeError('boom'))
        assert resp.status_code == 500
        assert resp.data['code'] == 'INTERNAL_ERROR'


class TestStandardJSONRenderer:

    def _render(self, data, status_code=200):
        response = Response(data, status=status_code)
        return json.loads(StandardJSONRenderer().render(data, renderer_context={'response': response}))

    def test_wraps_plain_data(self):
        assert self._render({'a': 1}) == {'status': 'success', 'data': {'a': 1}}

    def test_passes_through_envelope(self):
        body = {'status': 'success', 'data': [], 'message': 'ok'}
        assert self._render(body) == body

    def test_does_not_mistake_batch_status_for_envelope(self):
        assert self._render({'status': 'active'}) == {'status': 'success', 'data': {'status': 'active'}}

    def test_paginated(self):
        body = {
            'count': 1, 'next': None, 'previous': None,
            'page': 1, 'total_pages': 1, 'page_size': 10,
            'results': [{'id': 1}],
        }
        rendered = self._render(body)
        assert rendered['data'] == [{'id': 1}]
        assert rendered['meta']['total_pages'] == 1

    def test_empty(self):
        assert self._render(None) == {'status': 'success'}


class TestStandardPagination:

    @pytest.mark.parametrize('query, expected', [
        ({}, 10),
        ({'limit': '25'}, 25),
        ({'page_size': '5'}, 5),
        ({'limit': '1000'}, 100),
        ({'limit': 'abc'}, 10),
        ({'limit': '0'}, 10),
    ])
    def test_page_size(self, query, expected):
        from rest_framework.request import Request

        request = Request(APIRequestFactory().get('/', query))
        assert StandardPagination().get_page_size(request) == expected
