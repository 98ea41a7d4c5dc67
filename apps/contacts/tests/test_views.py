"""
Contact Views Tests
===================

Test Coverage:
1. List View - filters and sub-account isolation
2. Detail View - score breakdown and timeline
3. Create / Edit / Delete
4. Tags and quick activity log
5. Export / two-step import
6. Score API

Run tests:
    python manage.py test apps.contacts.tests.test_views
"""

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from apps.appointments.models import Appointment
from apps.contacts.models import Contact, Activity
from apps.contacts.views import IMPORT_SESSION_KEY
from apps.core.models import Account, Tag
from apps.pipelines.models import Pipeline, Opportunity

User = get_user_model()


class ContactViewTestMixin:

    def setUp(self):
        self.client = Client()

        self.account = Account.objects.create(name='Acme Realty')
        self.other_account = Account.objects.create(name='Other Agency')

        self.user = User.objects.create_user(
            email='admin@acme.test',
            password='testpass123',
            first_name='Sam',
            last_name='Lee',
            account=self.account,
            role='admin',
        )
        self.client.force_login(self.user)

        self.contact = Contact.objects.create(
            account=self.account,
            name='Jane Doe',
            email='jane@example.com',
            phone='555-0100',
            lead_score='hot',
            owner=self.user,
        )
        self.foreign_contact = Contact.objects.create(account=self.other_account, name='Not Mine')


class ContactListViewTest(ContactViewTestMixin, TestCase):

    def test_requires_login(self):
        self.client.logout()
        response = self.client.get(reverse('contacts:contact_list'))
        self.assertEqual(response.status_code, 302)

    def test_only_own_account_contacts(self):
        response = self.client.get(reverse('contacts:contact_list'))

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Jane Doe')
        self.assertNotContains(response, 'Not Mine')
        self.assertEqual(response.context['total_count'], 1)

    def test_search_filter(self):
        Contact.objects.create(account=self.account, name='John Roe')

        response = self.client.get(reverse('contacts:contact_list'), {'search': 'roe'})

        names = [c.name for c in response.context['contacts']]
        self.assertEqual(names, ['John Roe'])

    def test_missing_phone_filter(self):
        Contact.objects.create(account=self.account, name='No Phone')

        response = self.client.get(reverse('contacts:contact_list'), {'phone': 'no'})

        names = [c.name for c in response.context['contacts']]
        self.assertEqual(names, ['No Phone'])

    def test_lead_score_counts(self):
        Contact.objects.create(account=self.account, name='Cold One', lead_score='cold')

        response = self.client.get(reverse('contacts:contact_list'))

        self.assertEqual(response.context['score_counts'], {'hot': 1, 'warm': 0, 'cold': 1})


class ContactDetailViewTest(ContactViewTestMixin, TestCase):

    def test_detail_shows_score_and_timeline(self):
        Activity.objects.create(contact=self.contact, outcome='Answered', channel='Phone', logged_by=self.user)
        Appointment.objects.create(contact=self.contact, title='Viewing', datetime=timezone.now() + timedelta(days=1))

        response = self.client.get(reverse('contacts:contact_detail', args=[self.contact.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.context['timeline']), 2)
        self.assertEqual(response.context['timeline'][0]['kind'], 'appointment')
        self.assertEqual(response.context['score'].total, 8)
        self.assertContains(response, 'Viewing')

    def test_other_account_contact_is_404(self):
        response = self.client.get(reverse('contacts:contact_detail', args=[self.foreign_contact.pk]))
        self.assertEqual(response.status_code, 404)


class ContactEditViewsTest(ContactViewTestMixin, TestCase):

    def test_create_defaults_owner_and_account(self):
        response = self.client.post(reverse('contacts:contact_create'), {
            'name': 'New Person',
            'email': 'NEW@Example.com',
            'lead_score': '',
            'tags': 'vip, referral',
        })

        contact = Contact.objects.get(name='New Person')
        self.assertRedirects(response, reverse('contacts:contact_detail', args=[contact.pk]))
        self.assertEqual(contact.account, self.account)
        self.assertEqual(contact.owner, self.user)
        self.assertEqual(contact.email, 'new@example.com')
        self.assertIsNone(contact.lead_score)
        self.assertEqual(sorted(contact.tags.names()), ['referral', 'vip'])

    def test_create_requires_name(self):
        response = self.client.post(reverse('contacts:contact_create'), {'name': '', 'tags': ''})

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Contact.objects.filter(account=self.account, name='').exists())

    def test_edit(self):
        response = self.client.post(reverse('contacts:contact_edit', args=[self.contact.pk]), {
            'name': 'Jane Smith',
            'email': 'jane@example.com',
            'lead_score': 'warm',
            'tags': '',
        })

        self.assertEqual(response.status_code, 302)
        self.contact.refresh_from_db()
        self.assertEqual(self.contact.name, 'Jane Smith')
        self.assertEqual(self.contact.lead_score, 'warm')

    def test_delete(self):
        response = self.client.post(reverse('contacts:contact_delete', args=[self.contact.pk]))

        self.assertRedirects(response, reverse('contacts:contact_list'))
        self.assertFalse(Contact.objects.filter(pk=self.contact.pk).exists())

    def test_delete_requires_post(self):
        response = self.client.get(reverse('contacts:contact_delete', args=[self.contact.pk]))
        self.assertEqual(response.status_code, 405)

    def test_set_tags(self):
        self.client.post(reverse('contacts:contact_tags', args=[self.contact.pk]), {'tags': 'buyer, vip'})
        self.assertEqual(sorted(self.contact.tags.names()), ['buyer', 'vip'])

    def test_set_tags_reuses_existing_name_regardless_of_case(self):
        Tag.objects.create(name='VIP')

        self.client.post(reverse('contacts:contact_tags', args=[self.contact.pk]), {'tags': 'vip, Buyer'})

        self.assertEqual(sorted(self.contact.tags.names()), ['Buyer', 'VIP'])
        self.assertEqual(Tag.objects.filter(name__iexact='vip').count(), 1)

    def test_create_reuses_existing_tag_regardless_of_case(self):
        Tag.objects.create(name='Referral')

        self.client.post(reverse('contacts:contact_create'), {'name': 'New Person', 'tags': 'REFERRAL'})

        contact = Contact.objects.get(name='New Person')
        self.assertEqual(list(contact.tags.names()), ['Referral'])
        self.assertEqual(Tag.objects.count(), 1)

    def test_bulk_delete_only_own_account(self):
        response = self.client.post(reverse('contacts:contact_bulk_delete'), {
            'contact_ids': [self.contact.pk, self.foreign_contact.pk],
        })

        self.assertEqual(response.status_code, 302)
        self.assertFalse(Contact.objects.filter(pk=self.contact.pk).exists())
        self.assertTrue(Contact.objects.filter(pk=self.foreign_contact.pk).exists())


class LogActivityViewTest(ContactViewTestMixin, TestCase):

    def test_ajax_log(self):
        response = self.client.post(
            reverse('contacts:contact_log_activity', args=[self.contact.pk]),
            {'outcome': 'Meeting Booked', 'channel': 'Phone', 'notes': 'Tuesday 10am'},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data['success'])
        # 5 activity + 10 meeting + 15 recency
        self.assertEqual(data['score'], 30)

        self.contact.refresh_from_db()
        self.assertIsNotNone(self.contact.last_contacted_at)

    def test_follow_up_without_opportunity_rejected(self):
        response = self.client.post(
            reverse('contacts:contact_log_activity', args=[self.contact.pk]),
            {'outcome': 'Callback', 'channel': 'Phone', 'next_follow_up': '2026-11-02'},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('next_follow_up', response.json()['errors'])
        self.assertFalse(Activity.objects.exists())

    def test_follow_up_on_opportunity(self):
        pipeline = Pipeline.objects.create(account=self.account, name='Sales', stages=['New Lead'])
        opportunity = Opportunity.objects.create(contact=self.contact, pipeline=pipeline, stage='New Lead')

        response = self.client.post(
            reverse('contacts:contact_log_activity', args=[self.contact.pk]),
            {'outcome': 'Callback', 'channel': 'Phone', 'opportunity': opportunity.pk, 'next_follow_up': '2026-11-02'},
        )

        self.assertRedirects(response, reverse('contacts:contact_detail', args=[self.contact.pk]))
        opportunity.refresh_from_db()
        self.assertEqual(opportunity.next_follow_up_date.isoformat(), '2026-11-02')


class ExportImportViewTest(ContactViewTestMixin, TestCase):

    def test_csv_export(self):
        response = self.client.get(reverse('contacts:contact_export'))

        self.assertEqual(response.status_code, 200)
        self.assertIn('attachment; filename="contacts-', response['Content-Disposition'])
        body = response.content.decode()
        self.assertIn('"Jane Doe"', body)
        self.assertNotIn('Not Mine', body)

    def test_excel_export(self):
        response = self.client.get(reverse('contacts:contact_export'), {'format': 'excel'})

        self.assertEqual(response.status_code, 200)
        self.assertIn('.xlsx', response['Content-Disposition'])

    def test_two_step_import(self):
        upload = SimpleUploadedFile(
            'contacts.csv',
            b'Full Name,Email Address,Company\nAlice Green,alice@example.com,Green Homes\nBob Blue,,\n',
            content_type='text/csv',
        )
        response = self.client.post(reverse('contacts:contact_import'), {'file': upload})
        self.assertRedirects(response, reverse('contacts:contact_import_map'))

        response = self.client.get(reverse('contacts:contact_import_map'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['row_count'], 2)
        self.assertEqual(response.context['form']['col_0'].initial, 'name')

        response = self.client.post(reverse('contacts:contact_import_map'), {
            'col_0': 'name',
            'col_1': 'email',
            'col_2': 'business_name',
            'owner': self.user.pk,
        })

        self.assertRedirects(response, reverse('contacts:contact_list'))
        alice = Contact.objects.get(name='Alice Green')
        self.assertEqual(alice.account, self.account)
        self.assertEqual(alice.owner, self.user)
        self.assertEqual(alice.business_name, 'Green Homes')
        self.assertNotIn(IMPORT_SESSION_KEY, self.client.session)

    def test_import_rejects_unmapped_name(self):
        session = self.client.session
        session[IMPORT_SESSION_KEY] = 'Name,Email\nAlice,alice@example.com\n'
        session.save()

        response = self.client.post(reverse('contacts:contact_import_map'), {'col_0': '', 'col_1': 'email'})

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Contact.objects.filter(name='Alice').exists())

    def test_import_rejects_non_csv(self):
        upload = SimpleUploadedFile('contacts.xlsx', b'not csv', content_type='application/octet-stream')
        response = self.client.post(reverse('contacts:contact_import'), {'file': upload})

        self.assertEqual(response.status_code, 200)
        self.assertNotIn(IMPORT_SESSION_KEY, self.client.session)


class ContactScoreAPITest(ContactViewTestMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.api = APIClient()
        self.api.force_authenticate(user=self.user)

    def test_score_breakdown(self):
        Activity.objects.create(contact=self.contact, outcome='Answered', channel='Phone')

        response = self.api.get(f'/api/contacts/{self.contact.pk}/score/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['total'], 8)
        self.assertEqual(response.data['lead_score'], 'hot')
        self.assertEqual(len(response.data['components']), 6)

    def test_other_account_is_404(self):
        response = self.api.get(f'/api/contacts/{self.foreign_contact.pk}/score/')
        self.assertEqual(response.status_code, 404)
