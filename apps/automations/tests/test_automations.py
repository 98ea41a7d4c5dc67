import json

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from apps.automations.forms import AutomationForm
from apps.automations.models import Automation
from apps.core.models import Account

User = get_user_model()


class AutomationFormTest(TestCase):

    def _form(self, **overrides):
        data = {
            'name': 'Welcome sequence',
            'trigger_type': 'contact_created',
            'status': 'active',
            'trigger_config_json': '',
            'actions_json': '',
        }
        data.update(overrides)
        return AutomationForm(data=data)

    def test_empty_json_fields_default(self):
        form = self._form()

        self.assertTrue(form.is_valid(), form.errors)
        automation = form.save(commit=False)
        self.assertEqual(automation.trigger_config, {})
        self.assertEqual(automation.actions, [])

    def test_valid_actions(self):
        actions = [
            {'type': 'send_email', 'config': {'template_id': 1}},
            {'type': 'wait', 'config': {'days': 2}},
            {'type': 'add_tag'},
        ]
        form = self._form(actions_json=json.dumps(actions), trigger_config_json='{"source": "web"}')

        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.cleaned_data['actions_json'], actions)
        self.assertEqual(form.cleaned_data['trigger_config_json'], {'source': 'web'})

    def test_invalid_payloads(self):
        cases = {
            'not json': 'actions_json',
            '{"type": "wait"}': 'actions_json',
            '[{"config": {}}]': 'actions_json',
            '[{"type": "launch_rocket"}]': 'actions_json',
            '[{"type": "wait", "config": [1]}]': 'actions_json',
        }
        for payload, field in cases.items():
            with self.subTest(payload=payload):
                form = self._form(actions_json=payload)
                self.assertFalse(form.is_valid())
                self.assertIn(field, form.errors)

        form = self._form(trigger_config_json='[1, 2]')
        self.assertFalse(form.is_valid())
        self.assertIn('trigger_config_json', form.errors)


class AutomationModelTest(TestCase):

    def test_toggle(self):
        automation = Automation.objects.create(
            account=Account.objects.create(name='Acme'), name='Nurture', trigger_type='tag_added',
        )

        self.assertEqual(automation.toggle(), 'paused')
        self.assertEqual(automation.toggle(), 'active')
        automation.refresh_from_db()
        self.assertEqual(automation.status, 'active')

    def test_action_labels(self):
        automation = Automation(actions=[{'type': 'send_sms'}, {'type': 'custom'}, 'junk'])
        self.assertEqual(automation.action_labels(), ['Send SMS', 'custom'])


class AutomationViewsTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.account = Account.objects.create(name='Acme Realty')
        self.admin = User.objects.create_user(
            email='admin@acme.test', password='testpass123', account=self.account, role='admin',
        )
        self.client.force_login(self.admin)
        self.automation = Automation.objects.create(account=self.account, name='Nurture', trigger_type='tag_added')

    def test_list_is_account_scoped(self):
        Automation.objects.create(account=Account.objects.create(name='Other'), name='Theirs', trigger_type='tag_added')

        response = self.client.get(reverse('automations:automation_list'))

        self.assertEqual(list(response.context['automations']), [self.automation])
        self.assertEqual(response.context['active_count'], 1)

    def test_create(self):
        response = self.client.post(reverse('automations:automation_create'), {
            'name': 'Booked follow-up',
            'trigger_type': 'appointment_booked',
            'status': 'paused',
            'actions_json': '[{"type": "create_task", "config": {"title": "Prep"}}]',
        })

        self.assertRedirects(response, reverse('automations:automation_list'))
        created = Automation.objects.get(name='Booked follow-up')
        self.assertEqual(created.account, self.account)
        self.assertEqual(created.actions[0]['type'], 'create_task')

    def test_ajax_toggle(self):
        response = self.client.post(
            reverse('automations:automation_toggle', args=[self.automation.pk]),
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.json(), {'success': True, 'status': 'paused'})

    def test_agent_cannot_toggle(self):
        agent = User.objects.create_user(email='agent@acme.test', password='testpass123', account=self.account)
        self.client.force_login(agent)

        response = self.client.post(
            reverse('automations:automation_toggle', args=[self.automation.pk]),
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.status_code, 403)
        self.automation.refresh_from_db()
        self.assertEqual(self.automation.status, 'active')
