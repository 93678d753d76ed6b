import uuid

import apps.core.validators
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
            name='Specialization',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=150, unique=True)),
                ('description', models.TextField(blank=True)),
            ],
            options={
                'verbose_name': 'Specialization',
                'verbose_name_plural': 'Specializations',
                'db_table': 'specializations',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ProviderSpecialty',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('min_price', models.DecimalField(decimal_places=2, max_digits=10, validators=[apps.core.validators.validate_non_negative_decimal])),
                ('provider', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='specialties', to=settings.AUTH_USER_MODEL)),
                ('specialization', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='provider_specialties', to='providers.specialization')),
            ],
            options={
                'verbose_name': 'Provider Specialty',
                'verbose_name_plural': 'Provider Specialties',
                'db_table': 'provider_specialties',
                'ordering': ['created_at', 'id'],
                'indexes': [models.Index(fields=['provider', 'created_at'], name='provider_spec_created_idx')],
                'unique_together': {('provider', 'specialization')},
            },
        ),
    ]
