"""
Calendar Views Tests
====================

The month grid, booking, and status actions as seen from the calendar
and the contact page.
"""

from datetime import datetime, time, timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone

from apps.appointments.models import Appointment
from apps.contacts.models import Contact
from apps.core.models import Account
from apps.tasks.models import DailyTask

User = get_user_model()


class CalendarViewTestMixin:

    def setUp(self):
        self.client = Client()
        self.account = Account.objects.create(name='Acme Realty')
        self.user = User.objects.create_user(email='rep@acme.test', password='testpass123', account=self.account)
        self.client.force_login(self.user)

        self.contact = Contact.objects.create(account=self.account, name='Jane Doe')
        self.today = timezone.localdate()
        self.appointment = Appointment.objects.create(
            contact=self.contact,
            title='Viewing',
            datetime=timezone.make_aware(datetime.combine(self.today, time(10, 0))),
            assigned_to=self.user,
        )

    def day_cell(self, response, day):
        for week in response.context['weeks']:
            for cell in week:
                if cell['date'] == day:
                    return cell
        return None


class CalendarViewTest(CalendarViewTestMixin, TestCase):

    def test_month_grid(self):
        response = self.client.get(reverse('appointments:calendar'))

        self.assertEqual(response.status_code, 200)
        weeks = response.context['weeks']
        self.assertTrue(all(len(week) == 7 for week in weeks))
        # Weeks start on Sunday
        self.assertEqual(weeks[0][0]['date'].weekday(), 6)

        cell = self.day_cell(response, self.today)
        self.assertTrue(cell['is_today'])
        self.assertEqual([a.title for a in cell['appointments']], ['Viewing'])

    def test_status_filter(self):
        response = self.client.get(reverse('appointments:calendar'), {'status': 'cancelled'})

        cell = self.day_cell(response, self.today)
        self.assertEqual(cell['appointments'], [])

    def test_other_month(self):
        response = self.client.get(reverse('appointments:calendar'), {'year': 2024, 'month': 2})

        self.assertEqual(response.context['month'].month, 2)
        self.assertEqual(response.context['previous_month'].month, 1)
        self.assertEqual(response.context['next_month'].month, 3)

    def test_bad_month_falls_back_to_current(self):
        response = self.client.get(reverse('appointments:calendar'), {'year': 'x', 'month': '13'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['month'], self.today.replace(day=1))

    def test_other_account_hidden(self):
        other = Contact.objects.create(account=Account.objects.create(name='Other'), name='Stranger')
        Appointment.objects.create(contact=other, title='Secret', datetime=self.appointment.datetime)

        response = self.client.get(reverse('appointments:calendar'))

        cell = self.day_cell(response, self.today)
        self.assertEqual(len(cell['appointments']), 1)


class AppointmentActionsTest(CalendarViewTestMixin, TestCase):

    def test_create(self):
        start = (timezone.localtime() + timedelta(days=2)).replace(second=0, microsecond=0)

        response = self.client.post(reverse('appointments:appointment_create'), {
            'contact': self.contact.pk,
            'title': 'Listing presentation',
            'datetime': start.strftime('%Y-%m-%dT%H:%M'),
            'location': 'Office',
        })

        self.assertRedirects(response, reverse('appointments:calendar'))
        appointment = Appointment.objects.get(title='Listing presentation')
        self.assertEqual(appointment.assigned_to, self.user)
        self.assertTrue(DailyTask.objects.filter(title__startswith='Appointment: Listing presentation').exists())

    def test_complete_via_ajax(self):
        response = self.client.post(
            reverse('appointments:appointment_status', args=[self.appointment.pk]),
            {'status': 'completed'},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status_display'], 'Completed')

        # Reflected on the calendar and the contact page
        response = self.client.get(reverse('appointments:calendar'))
        self.assertEqual(self.day_cell(response, self.today)['appointments'][0].status, 'completed')

        response = self.client.get(reverse('contacts:contact_detail', args=[self.contact.pk]))
        appointment = response.context['appointments'][0]
        self.assertEqual(appointment.status, 'completed')
        self.assertEqual(response.context['score'].total, 15)

    def test_illegal_transition(self):
        self.appointment.status = Appointment.STATUS_CANCELLED
        self.appointment.save()

        response = self.client.post(
            reverse('appointments:appointment_status', args=[self.appointment.pk]),
            {'status': 'completed'},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['status'], 'cancelled')

    def test_unknown_status(self):
        response = self.client.post(
            reverse('appointments:appointment_status', args=[self.appointment.pk]),
            {'status': 'postponed'},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )
        self.assertEqual(response.status_code, 400)

    def test_edit_form_can_reopen(self):
        self.appointment.status = Appointment.STATUS_CANCELLED
        self.appointment.save()

        response = self.client.post(reverse('appointments:appointment_edit', args=[self.appointment.pk]), {
            'contact': self.contact.pk,
            'title': 'Viewing',
            'datetime': timezone.localtime(self.appointment.datetime).strftime('%Y-%m-%dT%H:%M'),
            'status': 'scheduled',
            'assigned_to': self.user.pk,
        })

        self.assertEqual(response.status_code, 302)
        self.appointment.refresh_from_db()
        self.assertEqual(self.appointment.status, 'scheduled')

    def test_delete(self):
        response = self.client.post(reverse('appointments:appointment_delete', args=[self.appointment.pk]))

        self.assertEqual(response.status_code, 302)
        self.assertFalse(Appointment.objects.exists())
