"""
Students — Views

Plain CRUD over the student registry.

@file students/views.py
"""

from rest_framework import viewsets

from .models import Student
from .serializers import StudentSerializer


class StudentViewSet(viewsets.ModelViewSet):
    serializer_class = StudentSerializer
    filterset_fields = ['sex', 'has_disability', 'is_active']
    search_fields = ['names', 'student_number', 'phone_number']
    ordering_fields = ['names', 'age', 'created_at']
    ordering = ['names']

    def get_queryset(self):
        return Student.objects.all()

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)
