import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('student_number', models.CharField(help_text='Number printed on the student ID card', max_length=50, unique=True, verbose_name='student number')),
                ('names', models.CharField(max_length=255, verbose_name='names')),
                ('sex', models.CharField(choices=[('female', 'Female'), ('male', 'Male')], default='female', max_length=10, verbose_name='sex')),
                ('age', models.PositiveSmallIntegerField(blank=True, null=True, verbose_name='age')),
                ('phone_number', models.CharField(blank=True, max_length=20, verbose_name='phone number')),
                ('has_disability', models.BooleanField(db_index=True, default=False, verbose_name='has disability')),
                ('disability_type', models.CharField(blank=True, max_length=100, verbose_name='disability type')),
                ('is_active', models.BooleanField(default=True, verbose_name='active')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='updated by')),
            ],
            options={
                'verbose_name': 'student',
                'verbose_name_plural': 'students',
                'ordering': ['names'],
                'indexes': [
                    models.Index(fields=['names'], name='student_names_idx'),
                    models.Index(fields=['age'], name='student_age_idx'),
                ],
            },
        ),
    ]
