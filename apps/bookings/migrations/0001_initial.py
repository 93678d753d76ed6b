import uuid

import apps.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('schedules', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Appointment',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('package_name', models.CharField(max_length=100)),
                ('duration_minutes', models.PositiveIntegerField(choices=[(60, '60 minutes'), (120, '120 minutes')], validators=[apps.core.validators.validate_appointment_duration])),
                ('start_time', models.TimeField(help_text='Time of day within the slot')),
                ('note', models.TextField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('completed', 'Completed'), ('cancelled', 'Cancelled'), ('refund_pending', 'Refund Pending'), ('refunded', 'Refunded')], db_index=True, default='pending', max_length=20)),
                ('commission_fee', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[apps.core.validators.validate_non_negative_decimal])),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='customer_appointments', to=settings.AUTH_USER_MODEL)),
                ('provider', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='provider_appointments', to=settings.AUTH_USER_MODEL)),
                ('slot', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='appointments', to='schedules.availabilityslot')),
            ],
            options={
                'verbose_name': 'Appointment',
                'verbose_name_plural': 'Appointments',
                'db_table': 'appointments',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['customer', 'status'], name='appt_customer_status_idx'),
                    models.Index(fields=['provider', 'status'], name='appt_provider_status_idx'),
                    models.Index(fields=['slot', 'status'], name='appt_slot_status_idx'),
                ],
            },
        ),
    ]
