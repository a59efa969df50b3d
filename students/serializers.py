"""
Students — Serializers

@file students/serializers.py
"""

from rest_framework import serializers

from .models import Student


class StudentSerializer(serializers.ModelSerializer):
    disability_label = serializers.CharField(read_only=True)

    class Meta:
        model = Student
        fields = [
            'id', 'student_number', 'names', 'sex', 'age',
            'phone_number', 'has_disability', 'disability_type',
            'disability_label', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'disability_label', 'created_at', 'updated_at']

    def validate_student_number(self, value):
        return value.strip()

    def validate_names(self, value):
        return value.strip()
