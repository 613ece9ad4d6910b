# Generated migration for blacklist and audit log models
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='BlacklistedEmail',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('email', models.EmailField(db_index=True, help_text='Stored lower-cased', max_length=254)),
                ('reason', models.TextField(blank=True, default='')),
                ('blacklisted_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('removed_at', models.DateTimeField(blank=True, null=True)),
                ('removed_reason', models.TextField(blank=True, default='')),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='blacklisted_emails', to='core.organization')),
                ('blacklisted_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='blacklist_entries_created', to=settings.AUTH_USER_MODEL)),
                ('removed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='blacklist_entries_removed', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Blacklisted Email',
                'verbose_name_plural': 'Blacklisted Emails',
                'db_table': 'blacklisted_emails',
                'ordering': ['-blacklisted_at'],
                'indexes': [models.Index(fields=['organization', 'email', 'is_active'], name='blacklist_org_email_act_idx')],
                'constraints': [models.UniqueConstraint(condition=models.Q(('is_active', True)), fields=('organization', 'email'), name='unique_active_blacklist_per_org_email')],
            },
        ),
        migrations.CreateModel(
            name='VerificationAuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('USER_VERIFIED', 'User verified'), ('USER_VERIFIED_WITHOUT_SERIAL', 'User verified (serial pending)'), ('USER_REJECTED', 'User rejected'), ('USER_UNBLOCKED', 'User unblocked'), ('SERIAL_ASSIGNED', 'Serial ID assigned'), ('SERIAL_COUNTER_RESET', 'Serial counter reset'), ('BLACKLIST_ADDED', 'Email blacklisted'), ('BLACKLIST_REMOVED', 'Email removed from blacklist')], db_index=True, max_length=40)),
                ('before_state', models.JSONField(blank=True, default=dict)),
                ('after_state', models.JSONField(blank=True, default=dict)),
                ('details', models.JSONField(blank=True, default=dict)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.CharField(blank=True, default='', max_length=512)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('organization', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='verification_audit_logs', to='core.organization')),
                ('actor', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='verification_actions', to=settings.AUTH_USER_MODEL)),
                ('member', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='verification_history', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Verification Audit Log',
                'verbose_name_plural': 'Verification Audit Logs',
                'db_table': 'verification_audit_logs',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['organization', 'created_at'], name='vaudit_org_created_idx'),
                    models.Index(fields=['member', 'created_at'], name='vaudit_member_created_idx'),
                ],
            },
        ),
    ]
