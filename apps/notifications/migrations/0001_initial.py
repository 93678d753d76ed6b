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
            name='Notification',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('message', models.TextField()),
                ('link', models.CharField(blank=True, max_length=255)),
                ('notification_type', models.CharField(choices=[('appointment_request', 'New Appointment Request'), ('appointment_confirmation', 'Appointment Confirmed'), ('appointment_declined', 'Appointment Declined'), ('appointment_cancellation', 'Appointment Cancelled'), ('appointment_expired', 'Appointment Expired'), ('appointment_completed', 'Appointment Completed'), ('payment', 'Payment Notification'), ('system', 'System Notification')], default='system', max_length=50)),
                ('is_read', models.BooleanField(default=False)),
                ('read_at', models.DateTimeField(blank=True, null=True)),
                ('is_sent_email', models.BooleanField(default=False)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Notification',
                'verbose_name_plural': 'Notifications',
                'db_table': 'notifications',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user', 'is_read'], name='notif_user_is_read_idx'),
                    models.Index(fields=['notification_type'], name='notif_type_idx'),
                ],
            },
        ),
    ]
