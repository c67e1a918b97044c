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
            name='RegistrationForm',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('infusionsoft_html', models.TextField(blank=True, default='', help_text='Raw form HTML pasted from Infusionsoft')),
                ('widget_url', models.URLField(blank=True, default='', help_text='WebinarFuel widget URL (.../widgets/<id>/<version>/elements)', max_length=1000)),
                ('widget_id', models.CharField(blank=True, default='', max_length=32)),
                ('widget_version', models.CharField(blank=True, default='', max_length=32)),
                ('session_id', models.CharField(blank=True, default='', max_length=255)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('generated', 'Generated'), ('active', 'Active'), ('archived', 'Archived')], db_index=True, default='draft', max_length=20)),
                ('custom_fields', models.JSONField(blank=True, default=dict)),
                ('settings', models.JSONField(blank=True, default=dict)),
                ('generated_filename', models.CharField(blank=True, max_length=512, null=True)),
                ('generated_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='registration_forms', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'forms',
                'ordering': ['-updated_at'],
            },
        ),
    ]
