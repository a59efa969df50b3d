"""
Students — Models

Registry of pad recipients. Each student carries the ID-card number that
staff scan at checkout, plus the demographic fields used by the
distribution analytics (age bucket, disability breakdown).

@file students/models.py
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Student(BaseModel):
    """A registered student eligible to receive pads."""

    class SexChoices(models.TextChoices):
        FEMALE = 'female', _('Female')
        MALE = 'male', _('Male')

    student_number = models.CharField(
        _('student number'), max_length=50, unique=True,
        help_text=_('Number printed on the student ID card'),
    )
    names = models.CharField(_('names'), max_length=255)
    sex = models.CharField(
        _('sex'), max_length=10,
        choices=SexChoices.choices, default=SexChoices.FEMALE,
    )
    age = models.PositiveSmallIntegerField(_('age'), null=True, blank=True)
    phone_number = models.CharField(_('phone number'), max_length=20, blank=True)
    has_disability = models.BooleanField(_('has disability'), default=False, db_index=True)
    disability_type = models.CharField(_('disability type'), max_length=100, blank=True)
    is_active = models.BooleanField(_('active'), default=True)

    class Meta:
        verbose_name = _('student')
        verbose_name_plural = _('students')
        ordering = ['names']
        indexes = [
            models.Index(fields=['names'], name='student_names_idx'),
            models.Index(fields=['age'], name='student_age_idx'),
        ]

    def __str__(self):
        return f'{self.names} ({self.student_number})'

    @property
    def disability_label(self) -> str:
        if not self.has_disability or not self.disability_type:
            return 'No Disability'
        return self.disability_type
