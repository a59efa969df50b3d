import uuid

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('students', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='InventoryBatch',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('pad_batch_id', models.CharField(editable=False, help_text='PAD/YYYYMMDD/BRAND/SUPPLIER/NNN', max_length=64, unique=True, verbose_name='pad batch ID')),
                ('brand_type', models.CharField(choices=[('Always Ultra', 'Always Ultra'), ('Whisper Choice', 'Whisper Choice'), ('Stayfree', 'Stayfree'), ('Kotex', 'Kotex'), ('Carefree', 'Carefree'), ('Generic Brand', 'Generic Brand'), ('Donated Pads', 'Donated Pads'), ('Other', 'Other')], db_index=True, max_length=32, verbose_name='brand / type')),
                ('quantity_supplied', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='quantity supplied')),
                ('current_stock', models.PositiveIntegerField(db_index=True, default=0, editable=False, verbose_name='current stock')),
                ('supplier_donor_name', models.CharField(db_index=True, max_length=255, verbose_name='supplier / donor name')),
                ('date_received', models.DateField(db_index=True, verbose_name='date received')),
                ('storage_location', models.CharField(choices=[('School Clinic', 'School Clinic'), ('Designated Pad Bank Room', 'Designated Pad Bank Room'), ('Administrative Office', 'Administrative Office'), ("Nurse's Office", "Nurse's Office"), ("Girls' Changing Room", "Girls' Changing Room"), ('Main Storage Room', 'Main Storage Room'), ('Other', 'Other')], db_index=True, max_length=32, verbose_name='storage location')),
                ('staff_in_charge', models.CharField(max_length=255, verbose_name='staff in charge')),
                ('staff_id', models.CharField(db_index=True, max_length=64, verbose_name='staff ID')),
                ('expiry_date', models.DateField(blank=True, db_index=True, null=True, verbose_name='expiry date')),
                ('status', models.CharField(choices=[('active', 'Active'), ('depleted', 'Depleted'), ('expired', 'Expired'), ('damaged', 'Damaged')], db_index=True, default='active', max_length=10, verbose_name='status')),
                ('unit_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True, validators=[django.core.validators.MinValueValidator(0)], verbose_name='unit cost')),
                ('total_value', models.DecimalField(blank=True, decimal_places=2, editable=False, max_digits=14, null=True, verbose_name='total value')),
                ('low_stock_threshold', models.PositiveIntegerField(default=10, verbose_name='low stock threshold')),
                ('is_low_stock', models.BooleanField(db_index=True, default=False, editable=False, verbose_name='low stock')),
                ('notes', models.TextField(blank=True, verbose_name='notes')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='updated by')),
            ],
            options={
                'verbose_name': 'inventory batch',
                'verbose_name_plural': 'inventory batches',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'storage_location'], name='inv_status_location_idx'),
                    models.Index(fields=['brand_type', 'storage_location'], name='inv_brand_location_idx'),
                    models.Index(fields=['is_low_stock', 'status'], name='inv_lowstock_status_idx'),
                    models.Index(fields=['status', 'expiry_date'], name='inv_status_expiry_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity_supplied__gt', 0)), name='inv_positive_quantity_supplied'),
                    models.CheckConstraint(condition=models.Q(('current_stock__gte', 0)), name='inv_non_negative_stock'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DistributionRecord',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_name', models.CharField(max_length=255, verbose_name='student name')),
                ('quantity_distributed', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='quantity distributed')),
                ('distributed_by', models.CharField(max_length=255, verbose_name='distributed by')),
                ('reason', models.CharField(default='Monthly allocation', max_length=255, verbose_name='reason')),
                ('notes', models.TextField(blank=True, verbose_name='notes')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False, verbose_name='created at')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='distribution_records', to='inventory.inventorybatch', verbose_name='batch')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='distributions', to='students.student', verbose_name='student')),
            ],
            options={
                'verbose_name': 'distribution record',
                'verbose_name_plural': 'distribution records',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['student', 'created_at'], name='dist_student_created_idx'),
                    models.Index(fields=['batch', 'created_at'], name='dist_batch_created_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity_distributed__gte', 1)), name='dist_positive_quantity'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockAdjustment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('adjustment_type', models.CharField(choices=[('addition', 'Addition'), ('reduction', 'Reduction'), ('correction', 'Correction')], max_length=12, verbose_name='adjustment type')),
                ('quantity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)], verbose_name='quantity')),
                ('reason', models.CharField(max_length=255, verbose_name='reason')),
                ('adjusted_by', models.CharField(max_length=255, verbose_name='adjusted by')),
                ('previous_stock', models.PositiveIntegerField(verbose_name='previous stock')),
                ('new_stock', models.PositiveIntegerField(verbose_name='new stock')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False, verbose_name='created at')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stock_adjustments', to='inventory.inventorybatch', verbose_name='batch')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='created by')),
            ],
            options={
                'verbose_name': 'stock adjustment',
                'verbose_name_plural': 'stock adjustments',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['batch', 'created_at'], name='adj_batch_created_idx'),
                ],
            },
        ),
    ]
