import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Automation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('trigger_type', models.CharField(choices=[('contact_created', 'Contact Created'), ('contact_updated', 'Contact Updated'), ('pipeline_stage_changed', 'Pipeline Stage Changed'), ('appointment_booked', 'Appointment Booked'), ('form_submitted', 'Form Submitted'), ('tag_added', 'Tag Added')], max_length=50)),
                ('trigger_config', models.JSONField(blank=True, default=dict, help_text='e.g. {"pipeline_id": 1, "stage": "Demo"}')),
                ('actions', models.JSONField(blank=True, default=list, help_text='List of {"type": ..., "config": {...}}')),
                ('status', models.CharField(choices=[('active', 'Active'), ('paused', 'Paused')], db_index=True, default='active', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('account', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='automations', to='core.account')),
            ],
            options={
                'verbose_name': 'Automation',
                'verbose_name_plural': 'Automations',
                'ordering': ['-created_at'],
            },
        ),
    ]
