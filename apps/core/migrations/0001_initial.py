import apps.core.models
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Account',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Sub-account name', max_length=200)),
                ('slug', models.SlugField(help_text='URL-friendly name (auto-generated)', max_length=200, unique=True)),
                ('company_name', models.CharField(blank=True, help_text='Legal/business name of the client', max_length=200)),
                ('industry', models.CharField(blank=True, help_text='e.g. Real Estate, Dental, SaaS', max_length=100)),
                ('primary_color', models.CharField(default='#2563eb', help_text='Hex color code', max_length=7)),
                ('secondary_color', models.CharField(default='#64748b', help_text='Hex color code', max_length=7)),
                ('logo', models.ImageField(blank=True, help_text='Sub-account logo', null=True, upload_to='accounts/logos/')),
                ('pipeline_stages', models.JSONField(blank=True, default=apps.core.models.default_pipeline_stages, help_text='Ordered stage names for the default pipeline')),
                ('is_active', models.BooleanField(default=True, help_text='Is sub-account active?')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Sub-account',
                'verbose_name_plural': 'Sub-accounts',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['is_active'], name='account_is_active_idx')],
            },
        ),
        migrations.CreateModel(
            name='Tag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True, verbose_name='name')),
                ('slug', models.SlugField(allow_unicode=True, max_length=100, unique=True, verbose_name='slug')),
                ('color', models.CharField(default='#6366f1', help_text='Hex color code for UI display', max_length=7)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Tag',
                'verbose_name_plural': 'Tags',
                'ordering': ['name'],
            },
        ),
    ]
