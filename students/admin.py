"""
Students — Django Admin Configuration

@file students/admin.py
"""

from django.contrib import admin

from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('student_number', 'names', 'sex', 'age', 'has_disability', 'is_active')
    list_filter = ('sex', 'has_disability', 'is_active')
    search_fields = ('student_number', 'names', 'phone_number')
    readonly_fields = ('id', 'created_at', 'updated_at', 'created_by', 'updated_by')
    ordering = ('names',)
