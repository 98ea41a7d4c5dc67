"""
Invoice Tests
=============

Test Coverage:
1. Invoice numbering and the status guard
2. InvoiceForm line items
3. List totals, status actions and permissions
4. Overdue job

Run tests:
    python manage.py test apps.agency.tests.test_invoices
"""

from datetime import date, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, Client as HttpClient
from django.urls import reverse
from django.utils import timezone

from apps.agency.forms import InvoiceForm
from apps.agency.models import Client, Invoice
from apps.agency.tasks import mark_overdue_invoices
from apps.core.models import Account

User = get_user_model()


class InvoiceModelTest(TestCase):

    def setUp(self):
        self.client_obj = Client.objects.create(name='Harbor Homes')

    def test_numbers_follow_highest_of_the_year(self):
        year = timezone.localdate().year
        first = Invoice.objects.create(client=self.client_obj, amount=100)
        second = Invoice.objects.create(client=self.client_obj, amount=200)

        self.assertEqual(first.invoice_number, f'INV-{year}-0001')
        self.assertEqual(second.invoice_number, f'INV-{year}-0002')

        first.delete()
        self.assertEqual(Invoice.next_number(year), f'INV-{year}-0003')
        self.assertEqual(Invoice.next_number(year + 1), f'INV-{year + 1}-0001')

    def test_paid_stamps_date(self):
        invoice = Invoice.objects.create(client=self.client_obj, amount=100)

        invoice.transition_to(Invoice.STATUS_SENT)
        invoice.transition_to(Invoice.STATUS_PAID, today=date(2026, 4, 2))

        invoice.refresh_from_db()
        self.assertEqual(invoice.status, Invoice.STATUS_PAID)
        self.assertEqual(invoice.paid_date, date(2026, 4, 2))

    def test_draft_cannot_be_paid(self):
        invoice = Invoice.objects.create(client=self.client_obj, amount=100)

        with self.assertRaises(ValueError):
            invoice.transition_to(Invoice.STATUS_PAID)

        invoice.refresh_from_db()
        self.assertEqual(invoice.status, Invoice.STATUS_DRAFT)
        self.assertIsNone(invoice.paid_date)

    def test_paid_is_final(self):
        invoice = Invoice.objects.create(client=self.client_obj, amount=100, status=Invoice.STATUS_PAID)
        self.assertFalse(invoice.can_transition_to(Invoice.STATUS_CANCELLED))

    def test_is_overdue(self):
        invoice = Invoice(client=self.client_obj, amount=100, status=Invoice.STATUS_SENT, due_date=date(2026, 3, 1))

        self.assertTrue(invoice.is_overdue(today=date(2026, 3, 2)))
        self.assertFalse(invoice.is_overdue(today=date(2026, 3, 1)))

        invoice.status = Invoice.STATUS_DRAFT
        self.assertFalse(invoice.is_overdue(today=date(2026, 3, 2)))


class InvoiceFormTest(TestCase):

    def setUp(self):
        self.client_obj = Client.objects.create(name='Harbor Homes')

    def test_line_items_set_amount(self):
        form = InvoiceForm(data={
            'client': self.client_obj.pk,
            'amount': '1',
            'line_items_text': 'Website build | 1500\n\nHosting, 12 months | 240.5\n',
        })

        self.assertTrue(form.is_valid(), form.errors)
        invoice = form.save()
        self.assertEqual(invoice.amount, Decimal('1740.50'))
        self.assertEqual(invoice.line_items, [
            {'description': 'Website build', 'amount': '1500.00'},
            {'description': 'Hosting, 12 months', 'amount': '240.50'},
        ])

    def test_amount_or_line_items_required(self):
        form = InvoiceForm(data={'client': self.client_obj.pk, 'amount': '', 'line_items_text': ''})

        self.assertFalse(form.is_valid())
        self.assertIn('amount', form.errors)

    def test_bad_line_item(self):
        form = InvoiceForm(data={'client': self.client_obj.pk, 'line_items_text': 'Website build | lots'})

        self.assertFalse(form.is_valid())
        self.assertIn('line_items_text', form.errors)

    def test_edit_shows_existing_line_items(self):
        invoice = Invoice.objects.create(
            client=self.client_obj, amount=50, line_items=[{'description': 'Logo', 'amount': '50.00'}],
        )
        form = InvoiceForm(instance=invoice)
        self.assertEqual(form.fields['line_items_text'].initial, 'Logo | 50.00')


class InvoiceViewsTest(TestCase):

    def setUp(self):
        self.http = HttpClient()
        self.account = Account.objects.create(name='Acme Realty')
        self.admin = User.objects.create_user(
            email='admin@acme.test', password='testpass123', account=self.account, role='admin',
        )
        self.agent = User.objects.create_user(
            email='agent@acme.test', password='testpass123', account=self.account, role='agent',
        )
        self.http.force_login(self.admin)

        self.harbor = Client.objects.create(name='Harbor Homes')
        self.summit = Client.objects.create(name='Summit Realty')
        self.sent = Invoice.objects.create(client=self.harbor, amount=500, status=Invoice.STATUS_SENT)
        self.paid = Invoice.objects.create(client=self.harbor, amount=300, status=Invoice.STATUS_PAID)
        self.overdue = Invoice.objects.create(client=self.summit, amount=200, status=Invoice.STATUS_OVERDUE)
        self.draft = Invoice.objects.create(client=self.summit, amount=50, description='Logo refresh')

    def test_list_totals(self):
        response = self.http.get(reverse('agency:invoice_list'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['total_outstanding'], 700)
        self.assertEqual(response.context['total_paid'], 300)
        self.assertEqual(response.context['overdue_count'], 1)

    def test_list_filters(self):
        response = self.http.get(reverse('agency:invoice_list'), {'client': self.summit.pk, 'status': 'draft'})
        self.assertEqual(list(response.context['invoices']), [self.draft])

        response = self.http.get(reverse('agency:invoice_list'), {'search': 'logo'})
        self.assertEqual(list(response.context['invoices']), [self.draft])

    def test_create(self):
        response = self.http.post(reverse('agency:invoice_create'), {
            'client': self.harbor.pk,
            'amount': '',
            'due_date': '2026-12-01',
            'line_items_text': 'Listing video | 800',
        })

        invoice = Invoice.objects.get(client=self.harbor, due_date=date(2026, 12, 1))
        self.assertRedirects(response, reverse('agency:invoice_detail', args=[invoice.pk]))
        self.assertEqual(invoice.amount, Decimal('800.00'))
        self.assertEqual(invoice.status, Invoice.STATUS_DRAFT)

    def test_detail_offers_valid_next_statuses(self):
        response = self.http.get(reverse('agency:invoice_detail', args=[self.draft.pk]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual([value for value, _label in response.context['next_statuses']], ['sent', 'cancelled'])

    def test_mark_paid(self):
        response = self.http.post(reverse('agency:invoice_status', args=[self.sent.pk]), {'status': 'paid'})

        self.assertRedirects(response, reverse('agency:invoice_detail', args=[self.sent.pk]))
        self.sent.refresh_from_db()
        self.assertEqual(self.sent.status, Invoice.STATUS_PAID)
        self.assertEqual(self.sent.paid_date, timezone.localdate())

    def test_invalid_status_change_rejected(self):
        self.http.post(reverse('agency:invoice_status', args=[self.paid.pk]), {'status': 'draft'})

        self.paid.refresh_from_db()
        self.assertEqual(self.paid.status, Invoice.STATUS_PAID)

    def test_agent_can_read_but_not_write(self):
        self.http.force_login(self.agent)

        self.assertEqual(self.http.get(reverse('agency:invoice_list')).status_code, 200)

        response = self.http.post(reverse('agency:invoice_delete', args=[self.draft.pk]))
        self.assertRedirects(response, reverse('core:dashboard'), fetch_redirect_response=False)
        self.assertTrue(Invoice.objects.filter(pk=self.draft.pk).exists())

    def test_delete(self):
        response = self.http.post(reverse('agency:invoice_delete', args=[self.draft.pk]))

        self.assertRedirects(response, reverse('agency:invoice_list'))
        self.assertFalse(Invoice.objects.filter(pk=self.draft.pk).exists())


class MarkOverdueInvoicesTest(TestCase):

    def test_only_past_due_sent_invoices(self):
        client = Client.objects.create(name='Harbor Homes')
        yesterday = timezone.localdate() - timedelta(days=1)
        late = Invoice.objects.create(client=client, amount=100, status=Invoice.STATUS_SENT, due_date=yesterday)
        current = Invoice.objects.create(client=client, amount=100, status=Invoice.STATUS_SENT,
                                         due_date=timezone.localdate())
        draft = Invoice.objects.create(client=client, amount=100, due_date=yesterday)

        mark_overdue_invoices()
        mark_overdue_invoices()

        statuses = dict(Invoice.objects.values_list('pk', 'status'))
        self.assertEqual(statuses[late.pk], Invoice.STATUS_OVERDUE)
        self.assertEqual(statuses[current.pk], Invoice.STATUS_SENT)
        self.assertEqual(statuses[draft.pk], Invoice.STATUS_DRAFT)
