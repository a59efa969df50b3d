"""
PadBank — Test Factories

Factory Boy factories for generating test data. Used across all test
modules.

@file tests/factories.py
"""

import uuid
from datetime import timedelta
from decimal import Decimal

import factory
from django.contrib.auth import get_user_model
from django.utils import timezone

from core.models import AuditLog
from inventory.models import InventoryBatch
from students.models import Student


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = get_user_model()
        django_get_or_create = ('username',)
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f'staff{n}')
    email = factory.LazyAttribute(lambda o: f'{o.username}@padbank.test')
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    is_active = True

    @factory.post_generation
    def password(self, create, extracted, **kwargs):
        password = extracted or 'TestPass2026!'
        self.set_password(password)
        if create:
            self.save(update_fields=['password'])


class SuperuserFactory(UserFactory):
    is_staff = True
    is_superuser = True


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------

class StudentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Student

    student_number = factory.Sequence(lambda n: f'STU-{n:05d}')
    names = factory.Faker('name')
    sex = Student.SexChoices.FEMALE
    age = 15
    has_disability = False
    disability_type = ''
    is_active = True


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------

class InventoryBatchFactory(factory.django.DjangoModelFactory):
    """
    Batch with a deterministic pad_batch_id. Derived fields are filled in
    by InventoryBatch.save() on insert.
    """

    class Meta:
        model = InventoryBatch

    pad_batch_id = factory.Sequence(lambda n: f'PAD/20250101/ALW/TST/{n:03d}')
    brand_type = InventoryBatch.BrandChoices.ALWAYS_ULTRA
    quantity_supplied = 50
    supplier_donor_name = 'Hope Foundation'
    date_received = factory.LazyFunction(lambda: timezone.localdate() - timedelta(days=7))
    storage_location = InventoryBatch.LocationChoices.SCHOOL_CLINIC
    staff_in_charge = 'Grace Okafor'
    staff_id = 'STF-001'
    expiry_date = factory.LazyFunction(lambda: timezone.localdate() + timedelta(days=365))
    unit_cost = factory.LazyFunction(lambda: Decimal('2.50'))
    low_stock_threshold = 10
    notes = ''


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

class AuditLogFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = AuditLog

    actor = factory.SubFactory(UserFactory)
    action = AuditLog.ActionChoices.CREATE
    model_name = 'InventoryBatch'
    object_id = factory.LazyFunction(lambda: str(uuid.uuid4()))
