# Generated manually for catering orders, event bookings and order number sequences

import uuid
from decimal import Decimal

from django.db import migrations, models


BILLABLE_FIELDS = [
    ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
    ('created_at', models.DateTimeField(auto_now_add=True)),
    ('updated_at', models.DateTimeField(auto_now=True)),
    ('order_number', models.CharField(max_length=100, unique=True)),
    ('customer_name', models.CharField(max_length=200)),
    ('customer_email', models.EmailField(max_length=254)),
    ('customer_phone', models.CharField(blank=True, default='', max_length=50)),
    ('company_name', models.CharField(blank=True, max_length=200, null=True)),
    ('notes', models.TextField(blank=True, null=True)),
    ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
    ('payment_method', models.CharField(choices=[('invoice', 'Invoice'), ('stripe', 'Stripe')], default='invoice', max_length=20)),
    ('payment_status', models.CharField(choices=[('pending', 'Pending'), ('paid', 'Paid'), ('failed', 'Failed'), ('refunded', 'Refunded')], default='pending', max_length=20)),
    ('cancellation_reason', models.TextField(blank=True, null=True)),
    ('cancelled_at', models.DateTimeField(blank=True, null=True)),
    ('billing_name', models.CharField(blank=True, max_length=200, null=True)),
    ('billing_street', models.CharField(blank=True, max_length=255, null=True)),
    ('billing_zip', models.CharField(blank=True, max_length=20, null=True)),
    ('billing_city', models.CharField(blank=True, max_length=100, null=True)),
    ('billing_country', models.CharField(default='DE', max_length=2)),
    ('lexoffice_invoice_id', models.CharField(blank=True, max_length=64, null=True)),
    ('lexoffice_document_type', models.CharField(blank=True, choices=[('quotation', 'Quotation'), ('invoice', 'Invoice')], max_length=20, null=True)),
    ('lexoffice_contact_id', models.CharField(blank=True, max_length=64, null=True)),
    ('lexoffice_credit_note_id', models.CharField(blank=True, max_length=64, null=True)),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CateringOrder',
            fields=[
                (name, field.clone()) for name, field in BILLABLE_FIELDS
            ] + [
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('in_preparation', 'In Preparation'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled')], default='pending', max_length=50)),
                ('is_pickup', models.BooleanField(default=False)),
                ('delivery_address', models.CharField(blank=True, max_length=255, null=True)),
                ('delivery_street', models.CharField(blank=True, max_length=255, null=True)),
                ('delivery_zip', models.CharField(blank=True, max_length=20, null=True)),
                ('delivery_city', models.CharField(blank=True, max_length=100, null=True)),
                ('delivery_floor', models.CharField(blank=True, max_length=50, null=True)),
                ('has_elevator', models.BooleanField(blank=True, null=True)),
                ('calculated_distance_km', models.DecimalField(blank=True, decimal_places=1, max_digits=8, null=True)),
                ('items', models.JSONField(blank=True, default=list)),
                ('delivery_cost', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('minimum_order_surcharge', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('desired_date', models.DateField(blank=True, null=True)),
                ('desired_time', models.CharField(blank=True, max_length=20, null=True)),
                ('internal_notes', models.TextField(blank=True, null=True)),
            ],
            options={
                'db_table': 'catering_orders',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='EventBooking',
            fields=[
                (name, field.clone()) for name, field in BILLABLE_FIELDS
            ] + [
                ('status', models.CharField(choices=[('menu_pending', 'Menu Pending'), ('confirmed', 'Confirmed'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='menu_pending', max_length=50)),
                ('package_name', models.CharField(max_length=200)),
                ('guest_count', models.PositiveIntegerField(default=1)),
                ('event_date', models.DateField(blank=True, null=True)),
                ('event_time', models.CharField(blank=True, max_length=20, null=True)),
                ('menu_selection', models.JSONField(blank=True, default=dict)),
                ('menu_confirmed', models.BooleanField(default=False)),
            ],
            options={
                'db_table': 'event_bookings',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='OrderNumberSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('prefix', models.CharField(max_length=20)),
                ('year', models.PositiveIntegerField()),
                ('last_value', models.PositiveIntegerField(default=0)),
            ],
            options={
                'db_table': 'order_number_sequences',
            },
        ),
        migrations.AddConstraint(
            model_name='ordernumbersequence',
            constraint=models.UniqueConstraint(fields=('prefix', 'year'), name='unique_order_number_sequence'),
        ),
        migrations.AddIndex(
            model_name='cateringorder',
            index=models.Index(fields=['status'], name='catering_or_status_idx'),
        ),
        migrations.AddIndex(
            model_name='cateringorder',
            index=models.Index(fields=['payment_status'], name='catering_or_payment_idx'),
        ),
        migrations.AddIndex(
            model_name='cateringorder',
            index=models.Index(fields=['customer_email'], name='catering_or_email_idx'),
        ),
        migrations.AddIndex(
            model_name='cateringorder',
            index=models.Index(fields=['created_at'], name='catering_or_created_idx'),
        ),
        migrations.AddIndex(
            model_name='eventbooking',
            index=models.Index(fields=['status'], name='event_booki_status_idx'),
        ),
        migrations.AddIndex(
            model_name='eventbooking',
            index=models.Index(fields=['payment_status'], name='event_booki_payment_idx'),
        ),
        migrations.AddIndex(
            model_name='eventbooking',
            index=models.Index(fields=['event_date'], name='event_booki_date_idx'),
        ),
    ]
