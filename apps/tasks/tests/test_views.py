"""
Task & Notification Views Tests
===============================
"""

from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse
from django.utils import timezone

from apps.core.models import Account
from apps.tasks.models import DailyTask, Notification

User = get_user_model()


class TaskViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.account = Account.objects.create(name='Acme Realty')
        self.admin = User.objects.create_user(email='admin@acme.test', password='testpass123', account=self.account, role='admin')
        self.agent = User.objects.create_user(email='agent@acme.test', password='testpass123', account=self.account, role='agent')
        self.today = timezone.localdate()

    def test_groups_by_due_date(self):
        self.client.force_login(self.admin)
        DailyTask.objects.create(account=self.account, owner=self.admin, title='Late', due_date=self.today - timedelta(days=1))
        DailyTask.objects.create(account=self.account, owner=self.admin, title='Now')
        DailyTask.objects.create(account=self.account, owner=self.admin, title='Later', due_date=self.today + timedelta(days=1))
        DailyTask.objects.create(account=self.account, owner=self.admin, title='Done', completed=True)

        response = self.client.get(reverse('tasks:task_list'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual([t.title for t in response.context['overdue_tasks']], ['Late'])
        self.assertEqual([t.title for t in response.context['today_tasks']], ['Now'])
        self.assertEqual([t.title for t in response.context['upcoming_tasks']], ['Later'])
        self.assertEqual(response.context['completed_today'], 1)

    def test_agent_sees_own_and_company_wide(self):
        self.client.force_login(self.agent)
        DailyTask.objects.create(account=self.account, owner=self.agent, title='Mine')
        DailyTask.objects.create(account=self.account, owner=self.admin, title='Team meeting', is_company_wide=True)
        DailyTask.objects.create(account=self.account, owner=self.admin, title='Private')

        response = self.client.get(reverse('tasks:task_list'))

        titles = {t.title for t in response.context['today_tasks']}
        self.assertEqual(titles, {'Mine', 'Team meeting'})

    def test_create_defaults_owner(self):
        self.client.force_login(self.agent)

        response = self.client.post(reverse('tasks:task_create'), {
            'title': 'Call back Jane',
            'due_date': self.today.isoformat(),
            'priority': 'high',
        })

        self.assertRedirects(response, reverse('tasks:task_list'))
        task = DailyTask.objects.get(title='Call back Jane')
        self.assertEqual(task.owner, self.agent)
        self.assertEqual(task.account, self.account)

    def test_toggle(self):
        self.client.force_login(self.agent)
        task = DailyTask.objects.create(account=self.account, owner=self.agent, title='Mine')

        response = self.client.post(reverse('tasks:task_toggle', args=[task.pk]), HTTP_X_REQUESTED_WITH='XMLHttpRequest')

        self.assertTrue(response.json()['completed'])
        task.refresh_from_db()
        self.assertTrue(task.completed)

    def test_agent_cannot_toggle_private_task_of_others(self):
        self.client.force_login(self.agent)
        task = DailyTask.objects.create(account=self.account, owner=self.admin, title='Private')

        response = self.client.post(reverse('tasks:task_toggle', args=[task.pk]))

        self.assertEqual(response.status_code, 404)


class NotificationViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.account = Account.objects.create(name='Acme Realty')
        self.user = User.objects.create_user(email='rep@acme.test', password='testpass123', account=self.account)
        self.client.force_login(self.user)

    def test_list_and_unread_count(self):
        Notification.objects.create(owner=self.user, title='One')
        Notification.objects.create(owner=self.user, title='Two', read=True)

        response = self.client.get(reverse('tasks:notification_list'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['unread_count'], 1)

    def test_read_follows_link(self):
        notification = Notification.objects.create(owner=self.user, title='Follow up', link='/contacts/')

        response = self.client.post(reverse('tasks:notification_read', args=[notification.pk]))

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response['Location'], '/contacts/')
        notification.refresh_from_db()
        self.assertTrue(notification.read)

    def test_read_all(self):
        Notification.objects.create(owner=self.user, title='One')
        Notification.objects.create(owner=self.user, title='Two')

        self.client.post(reverse('tasks:notification_read_all'))

        self.assertFalse(Notification.objects.filter(read=False).exists())
