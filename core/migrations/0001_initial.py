# Generated migration for Organization model
import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Organization',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('short_code', models.CharField(max_length=10, unique=True, validators=[django.core.validators.RegexValidator(message='Short code must be 2-10 uppercase letters.', regex='^[A-Z]{2,10}$')])),
                ('foundation_year', models.PositiveIntegerField(blank=True, null=True)),
                ('serial_counter', models.PositiveIntegerField(default=0, help_text='Last allocated member serial number')),
                ('official_email', models.EmailField(blank=True, default='', max_length=254)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Organization',
                'verbose_name_plural': 'Organizations',
                'db_table': 'organizations',
                'ordering': ['name'],
                'constraints': [models.CheckConstraint(condition=models.Q(('serial_counter__gte', 0)), name='organization_serial_counter_non_negative')],
            },
        ),
    ]
