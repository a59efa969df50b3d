"""
Students — Service Layer

Lookup helpers used by the distribution workflow.

@file students/services.py
"""

import uuid

from django.db.models import Q

from core.exceptions import ResourceNotFoundError, StudentInactive

from .models import Student


class StudentService:

    @staticmethod
    def lookup_filter(identifier) -> Q:
        """Match either the internal UUID or the scanned card number."""
        identifier = str(identifier).strip()
        query = Q(student_number=identifier)
        try:
            query |= Q(pk=uuid.UUID(identifier))
        except ValueError:
            pass
        return query

    @classmethod
    def resolve(cls, identifier, *, for_update: bool = False, active_only: bool = False) -> Student:
        """
        Return the student for ``identifier`` or raise ResourceNotFoundError.

        With ``for_update`` the row is locked until the surrounding
        transaction ends, which serialises concurrent checkouts for the
        same student. With ``active_only`` a deactivated student raises
        StudentInactive.
        """
        if identifier in (None, ''):
            raise ResourceNotFoundError(detail='Student not found.')
        qs = Student.objects.filter(cls.lookup_filter(identifier))
        if for_update:
            qs = qs.select_for_update()
        student = qs.first()
        if student is None:
            raise ResourceNotFoundError(detail='Student not found.')
        if active_only and not student.is_active:
            raise StudentInactive()
        return student
