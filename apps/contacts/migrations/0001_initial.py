import django.db.models.deletion
import taggit.managers
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
            name='Contact',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text="Contact's full name", max_length=200)),
                ('email', models.EmailField(blank=True, help_text='Email address (optional)', max_length=254)),
                ('phone', models.CharField(blank=True, db_index=True, help_text='Phone number', max_length=40)),
                ('business_name', models.CharField(blank=True, max_length=200)),
                ('address', models.CharField(blank=True, max_length=255)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('postal_code', models.CharField(blank=True, max_length=20)),
                ('website', models.CharField(blank=True, max_length=255)),
                ('linkedin_url', models.CharField(blank=True, max_length=255)),
                ('source', models.CharField(blank=True, help_text='Where did this contact come from?', max_length=100)),
                ('notes', models.TextField(blank=True)),
                ('lead_score', models.CharField(blank=True, choices=[('hot', 'Hot'), ('warm', 'Warm'), ('cold', 'Cold')], db_index=True, help_text='Hot / warm / cold label chosen by the owner', max_length=10, null=True)),
                ('last_contacted_at', models.DateTimeField(blank=True, help_text='Updated every time an activity is logged', null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('account', models.ForeignKey(help_text='Sub-account that owns this contact', on_delete=django.db.models.deletion.CASCADE, related_name='contacts', to='core.account')),
                ('owner', models.ForeignKey(blank=True, help_text='Who is responsible for this contact', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='contacts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Contact',
                'verbose_name_plural': 'Contacts',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='TaggedContact',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('content_object', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to='contacts.contact')),
                ('tag', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='%(app_label)s_%(class)s_items', to='core.tag')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.AddField(
            model_name='contact',
            name='tags',
            field=taggit.managers.TaggableManager(blank=True, help_text='A comma-separated list of tags.', through='contacts.TaggedContact', to='core.Tag', verbose_name='Tags'),
        ),
        migrations.CreateModel(
            name='Activity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('outcome', models.CharField(choices=[('Answered', 'Answered'), ('No Answer', 'No Answer'), ('Voicemail', 'Voicemail'), ('Not Interested', 'Not Interested'), ('Callback', 'Callback'), ('Meeting Booked', 'Meeting Booked'), ('Left Message', 'Left Message'), ('Wrong Number', 'Wrong Number')], max_length=30)),
                ('channel', models.CharField(choices=[('Phone', 'Phone'), ('LinkedIn', 'LinkedIn'), ('Email', 'Email')], default='Phone', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('next_action', models.CharField(blank=True, help_text='What happens next', max_length=255)),
                ('logged_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('contact', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activities', to='contacts.contact')),
                ('logged_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='logged_activities', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Activity',
                'verbose_name_plural': 'Activities',
                'ordering': ['-logged_at'],
            },
        ),
        migrations.AddIndex(
            model_name='contact',
            index=models.Index(fields=['account', 'lead_score'], name='contact_account_score_idx'),
        ),
        migrations.AddIndex(
            model_name='contact',
            index=models.Index(fields=['account', 'owner'], name='contact_account_owner_idx'),
        ),
        migrations.AddIndex(
            model_name='contact',
            index=models.Index(fields=['account', '-created_at'], name='contact_account_created_idx'),
        ),
        migrations.AddIndex(
            model_name='activity',
            index=models.Index(fields=['contact', '-logged_at'], name='activity_contact_logged_idx'),
        ),
        migrations.AddIndex(
            model_name='activity',
            index=models.Index(fields=['logged_by', '-logged_at'], name='activity_user_logged_idx'),
        ),
    ]
