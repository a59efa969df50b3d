"""
Inventory — URL Configuration

@file inventory/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import InventoryBatchViewSet

app_name = 'inventory'

router = DefaultRouter()
router.register('', InventoryBatchViewSet, basename='batch')

urlpatterns = [
    path('', include(router.urls)),
]
