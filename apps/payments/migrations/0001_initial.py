import uuid

import apps.core.utils.helpers
import apps.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('bookings', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Invoice',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=10, validators=[apps.core.validators.validate_non_negative_decimal])),
                ('refund_amount', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[apps.core.validators.validate_non_negative_decimal])),
                ('status', models.CharField(choices=[('success', 'Success'), ('refund_pending', 'Refund Pending'), ('refunded', 'Refunded')], db_index=True, default='success', max_length=20)),
                ('transaction_ref', models.CharField(default=apps.core.utils.helpers.generate_transaction_ref, help_text='Payment reference (PAY_XXXXXXXX)', max_length=32, unique=True)),
                ('payment_method', models.CharField(max_length=50)),
                ('appointment', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='invoice', to='bookings.appointment')),
                ('user', models.ForeignKey(help_text='Customer who paid', on_delete=django.db.models.deletion.CASCADE, related_name='invoices', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Invoice',
                'verbose_name_plural': 'Invoices',
                'db_table': 'invoices',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['user', 'status'], name='invoice_user_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='ProviderEarnings',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('total_completed_matches', models.PositiveIntegerField(default=0)),
                ('total_net_paid', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('provider', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='earnings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Provider Earnings',
                'verbose_name_plural': 'Provider Earnings',
                'db_table': 'provider_earnings',
            },
        ),
    ]
