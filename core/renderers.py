"""
Core — Response Renderer

Wraps all successful responses in the standard envelope:
  { "status": "success", "data": ..., "meta": ... }

@file core/renderers.py
"""

from rest_framework.renderers import JSONRenderer

PAGINATION_META_KEYS = ('count', 'next', 'previous', 'page', 'total_pages', 'page_size')


class StandardJSONRenderer(JSONRenderer):
    """Wraps successful API responses in a consistent envelope."""

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None

        if response is not None and response.status_code >= 400:
            return super().render(data, accepted_media_type, renderer_context)

        if isinstance(data, dict) and data.get('status') in ('success', 'error'):
            return super().render(data, accepted_media_type, renderer_context)

        if isinstance(data, dict) and 'results' in data:
            envelope = {
                'status': 'success',
                'data': data['results'],
                'meta': {key: data.get(key) for key in PAGINATION_META_KEYS},
            }
        elif data is None:
            envelope = {'status': 'success'}
        else:
            envelope = {
                'status': 'success',
                'data': data,
            }

        return super().render(envelope, accepted_media_type, renderer_context)
