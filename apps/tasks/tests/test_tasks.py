"""
Follow-up Reminder Job Tests
============================

Run the Celery task body synchronously.
"""

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core import mail
from django.test import TestCase
from django.utils import timezone

from apps.contacts.models import Contact
from apps.core.models import Account
from apps.pipelines.models import Pipeline, Opportunity
from apps.tasks.models import Notification
from apps.tasks.tasks import send_follow_up_reminders

User = get_user_model()


class FollowUpRemindersTest(TestCase):

    def setUp(self):
        self.account = Account.objects.create(name='Acme Realty')
        self.owner = User.objects.create_user(email='rep@acme.test', password='testpass123', account=self.account)
        self.pipeline = Pipeline.objects.create(account=self.account, name='Sales', stages=['New Lead', 'Demo'])
        self.contact = Contact.objects.create(account=self.account, name='Jane Doe', owner=self.owner)
        self.today = timezone.localdate()

    def opportunity(self, follow_up, **kwargs):
        kwargs.setdefault('owner', self.owner)
        return Opportunity.objects.create(
            contact=self.contact,
            pipeline=self.pipeline,
            stage='Demo',
            next_follow_up_date=follow_up,
            **kwargs
        )

    def test_due_and_overdue_notified_once_per_day(self):
        self.opportunity(self.today)
        self.opportunity(self.today - timedelta(days=3))

        send_follow_up_reminders()
        send_follow_up_reminders()

        notifications = Notification.objects.filter(owner=self.owner, type='follow_up')
        self.assertEqual(notifications.count(), 2)
        self.assertEqual(sum('Overdue since' in n.message for n in notifications), 1)
        self.assertEqual(len(mail.outbox), 2)

    def test_future_follow_up_skipped(self):
        self.opportunity(self.today + timedelta(days=1))
        send_follow_up_reminders()
        self.assertFalse(Notification.objects.exists())

    def test_falls_back_to_contact_owner(self):
        self.opportunity(self.today, owner=None)

        send_follow_up_reminders()

        self.assertTrue(Notification.objects.filter(owner=self.owner).exists())

    def test_disabled_reminders_respected(self):
        profile = self.owner.settings
        profile.follow_up_reminder_enabled = False
        profile.save()
        self.opportunity(self.today)

        send_follow_up_reminders()

        self.assertFalse(Notification.objects.exists())

    def test_email_off_still_notifies(self):
        profile = self.owner.settings
        profile.email_notifications = False
        profile.save()
        self.opportunity(self.today)

        send_follow_up_reminders()

        self.assertEqual(Notification.objects.count(), 1)
        self.assertEqual(len(mail.outbox), 0)
