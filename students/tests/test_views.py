"""
Tests — student registry API and lookup helpers.

@file students/tests/test_views.py
"""

import pytest

from core.exceptions import ResourceNotFoundError, StudentInactive
from students.models import Student
from students.services import StudentService
from tests.factories import StudentFactory


pytestmark = pytest.mark.django_db

BASE = '/api/v1/students/'


class TestStudentApi:

    def test_create(self, authenticated_client, user):
        resp = authenticated_client.post(
            BASE,
            {'student_number': ' STU-777 ', 'names': 'Amaka Obi', 'age': 14},
            format='json',
        )
        assert resp.status_code == 201
        student = Student.objects.get(student_number='STU-777')
        assert student.created_by == user
        assert resp.json()['data']['disability_label'] == 'No Disability'

    def test_duplicate_number_rejected(self, authenticated_client):
        StudentFactory(student_number='STU-1')
        resp = authenticated_client.post(
            BASE, {'student_number': 'STU-1', 'names': 'Someone'}, format='json',
        )
        assert resp.status_code == 400

    def test_search(self, authenticated_client):
        StudentFactory(names='Chioma Eze')
        StudentFactory(names='Bisi Ade')
        body = authenticated_client.get(BASE, {'search': 'Chioma'}).json()
        assert body['meta']['count'] == 1

    def test_filter_by_disability(self, authenticated_client):
        StudentFactory(has_disability=True, disability_type='Hearing')
        StudentFactory()
        body = authenticated_client.get(BASE, {'has_disability': 'true'}).json()
        assert [row['disability_label'] for row in body['data']] == ['Hearing']


class TestStudentService:

    def test_resolve_by_number_and_pk(self):
        student = StudentFactory()
        assert StudentService.resolve(student.student_number) == student
        assert StudentService.resolve(str(student.pk)) == student

    def test_resolve_missing(self):
        with pytest.raises(ResourceNotFoundError):
            StudentService.resolve('missing')

    def test_resolve_blank(self):
        with pytest.raises(ResourceNotFoundError):
            StudentService.resolve('')

    def test_resolve_inactive(self):
        student = StudentFactory(is_active=False)
        assert StudentService.resolve(student.student_number) == student
        with pytest.raises(StudentInactive):
            StudentService.resolve(student.student_number, active_only=True)
