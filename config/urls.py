"""
PadBank — Root URL Configuration

All API endpoints are namespaced under /api/v1/.
The DRF browsable API is available for route inspection in development.

@file config/urls.py
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

admin.site.site_header = 'PadBank Administration'
admin.site.site_title = 'PadBank'
admin.site.index_title = 'Pad Inventory & Distribution'


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """PadBank API v1 — endpoint directory."""
    return Response({
        'auth': {
            'token': reverse('api-v1:token-obtain', request=request, format=format),
            'refresh': reverse('api-v1:token-refresh', request=request, format=format),
        },
        'students': reverse('api-v1:students:student-list', request=request, format=format),
        'inventory': {
            'batches': reverse('api-v1:inventory:batch-list', request=request, format=format),
            'checkout': reverse('api-v1:inventory:batch-checkout', request=request, format=format),
            'summary': reverse('api-v1:inventory:batch-summary', request=request, format=format),
            'analytics': reverse('api-v1:inventory:batch-insights', request=request, format=format),
        },
    })


api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('auth/token/', TokenObtainPairView.as_view(), name='token-obtain'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('students/', include('students.urls', namespace='students')),
    path('inventory/', include('inventory.urls', namespace='inventory')),
]

urlpatterns = [
    path('admin/', admin.site.urls),

    # DRF session auth (powers the "Log in" button on the browsable API)
    path('api/auth/', include('rest_framework.urls', namespace='rest_framework')),

    # Versioned API
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]
