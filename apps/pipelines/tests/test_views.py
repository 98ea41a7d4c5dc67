"""
Pipeline Views Tests
====================

Kanban board, add/remove opportunity, bulk assign and pipeline CRUD.
"""

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from apps.contacts.models import Contact
from apps.core.models import Account
from apps.pipelines.models import Pipeline, Opportunity

User = get_user_model()


class PipelineViewTestMixin:

    def setUp(self):
        self.client = Client()
        self.account = Account.objects.create(name='Acme Realty')

        self.admin = User.objects.create_user(
            email='admin@acme.test', password='testpass123', account=self.account, role='admin',
        )
        self.agent = User.objects.create_user(
            email='agent@acme.test', password='testpass123', account=self.account, role='agent',
        )
        self.client.force_login(self.admin)

        self.pipeline = Pipeline.objects.create(
            account=self.account, name='Sales', stages=['New Lead', 'Demo', 'Proposal'],
        )
        self.jane = Contact.objects.create(account=self.account, name='Jane Doe')
        self.john = Contact.objects.create(account=self.account, name='John Roe')


class KanbanViewTest(PipelineViewTestMixin, TestCase):

    def test_columns_in_stage_order(self):
        Opportunity.objects.create(contact=self.jane, pipeline=self.pipeline, stage='Demo', opportunity_value=1000)
        Opportunity.objects.create(contact=self.john, pipeline=self.pipeline, stage='Demo', opportunity_value=500)

        response = self.client.get(reverse('pipelines:kanban', args=[self.pipeline.pk]))

        self.assertEqual(response.status_code, 200)
        columns = response.context['columns']
        self.assertEqual([c['stage'] for c in columns], ['New Lead', 'Demo', 'Proposal'])
        self.assertEqual(columns[1]['count'], 2)
        self.assertEqual(columns[1]['value'], 1500)
        self.assertEqual(response.context['total_count'], 2)

    def test_orphaned_stage_listed_separately(self):
        Opportunity.objects.create(contact=self.jane, pipeline=self.pipeline, stage='Old Stage')

        response = self.client.get(reverse('pipelines:kanban', args=[self.pipeline.pk]))

        self.assertEqual(len(response.context['orphaned']), 1)
        self.assertContains(response, 'Old Stage')

    def test_search(self):
        Opportunity.objects.create(contact=self.jane, pipeline=self.pipeline, stage='Demo')
        Opportunity.objects.create(contact=self.john, pipeline=self.pipeline, stage='Demo')

        response = self.client.get(reverse('pipelines:kanban', args=[self.pipeline.pk]), {'search': 'jane'})

        self.assertEqual(response.context['total_count'], 1)

    def test_home_redirects_to_first_pipeline(self):
        response = self.client.get(reverse('pipelines:home'))
        self.assertRedirects(response, reverse('pipelines:kanban', args=[self.pipeline.pk]))

    def test_home_uses_default_pipeline_setting(self):
        second = Pipeline.objects.create(account=self.account, name='Second', stages=['A'])
        profile = self.admin.settings
        profile.default_pipeline = second
        profile.save()

        response = self.client.get(reverse('pipelines:home'))

        self.assertRedirects(response, reverse('pipelines:kanban', args=[second.pk]))

    def test_other_account_pipeline_is_404(self):
        other = Pipeline.objects.create(account=Account.objects.create(name='Other'), name='Theirs', stages=['A'])
        response = self.client.get(reverse('pipelines:kanban', args=[other.pk]))
        self.assertEqual(response.status_code, 404)


class OpportunityViewsTest(PipelineViewTestMixin, TestCase):

    def test_add_defaults_to_first_stage(self):
        response = self.client.post(reverse('pipelines:opportunity_add'), {
            'contact': self.jane.pk,
            'pipeline': self.pipeline.pk,
            'stage': '',
        })

        self.assertRedirects(response, reverse('pipelines:kanban', args=[self.pipeline.pk]))
        self.assertEqual(Opportunity.objects.get(contact=self.jane).stage, 'New Lead')

    def test_add_invalid_stage_ajax(self):
        response = self.client.post(
            reverse('pipelines:opportunity_add'),
            {'contact': self.jane.pk, 'pipeline': self.pipeline.pk, 'stage': 'Nope'},
            HTTP_X_REQUESTED_WITH='XMLHttpRequest',
        )

        self.assertEqual(response.status_code, 400)
        self.assertFalse(Opportunity.objects.exists())

    def test_delete(self):
        opportunity = Opportunity.objects.create(contact=self.jane, pipeline=self.pipeline, stage='Demo')

        response = self.client.post(reverse('pipelines:opportunity_delete', args=[opportunity.pk]))

        self.assertEqual(response.status_code, 302)
        self.assertFalse(Opportunity.objects.exists())

    def test_bulk_assign(self):
        Opportunity.objects.create(contact=self.jane, pipeline=self.pipeline, stage='Proposal')

        response = self.client.post(reverse('pipelines:bulk_assign'), {
            'contact_ids': f'{self.jane.pk},{self.john.pk}',
            'pipeline': self.pipeline.pk,
            'stage': 'Demo',
            'owner': self.agent.pk,
        })

        self.assertRedirects(response, reverse('pipelines:kanban', args=[self.pipeline.pk]))
        self.assertEqual(Opportunity.objects.count(), 2)
        self.assertEqual(set(Opportunity.objects.values_list('stage', flat=True)), {'Demo'})
        self.assertEqual(set(Opportunity.objects.values_list('owner', flat=True)), {self.agent.pk})

    def test_bulk_assign_without_selection(self):
        response = self.client.post(reverse('pipelines:bulk_assign'), {
            'contact_ids': '',
            'pipeline': self.pipeline.pk,
        })

        self.assertRedirects(response, reverse('contacts:contact_list'))
        self.assertFalse(Opportunity.objects.exists())


class PipelineCrudViewsTest(PipelineViewTestMixin, TestCase):

    def test_list(self):
        Opportunity.objects.create(contact=self.jane, pipeline=self.pipeline, stage='Demo', opportunity_value=250)

        response = self.client.get(reverse('pipelines:pipeline_list'))

        self.assertEqual(response.status_code, 200)
        pipeline = response.context['pipelines'][0]
        self.assertEqual(pipeline.opportunities_count, 1)
        self.assertEqual(pipeline.total_value, 250)

    def test_create(self):
        response = self.client.post(reverse('pipelines:pipeline_create'), {
            'name': 'Renewals',
            'stages_text': 'Due\n\nContacted\nRenewed\n',
        })

        pipeline = Pipeline.objects.get(name='Renewals')
        self.assertRedirects(response, reverse('pipelines:kanban', args=[pipeline.pk]))
        self.assertEqual(pipeline.stages, ['Due', 'Contacted', 'Renewed'])
        self.assertEqual(pipeline.account, self.account)

    def test_duplicate_stage_rejected(self):
        response = self.client.post(reverse('pipelines:pipeline_create'), {
            'name': 'Broken',
            'stages_text': 'A\nA',
        })

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Pipeline.objects.filter(name='Broken').exists())

    def test_rename_stage_leaves_opportunity_orphaned(self):
        opportunity = Opportunity.objects.create(contact=self.jane, pipeline=self.pipeline, stage='Demo')

        self.client.post(reverse('pipelines:pipeline_edit', args=[self.pipeline.pk]), {
            'name': 'Sales',
            'stages_text': 'New Lead\nPresentation\nProposal',
        })

        opportunity.refresh_from_db()
        self.assertEqual(opportunity.stage, 'Demo')
        self.assertTrue(opportunity.is_orphaned())

    def test_agent_cannot_create(self):
        self.client.force_login(self.agent)

        response = self.client.post(reverse('pipelines:pipeline_create'), {'name': 'Nope', 'stages_text': 'A'})

        self.assertEqual(response.status_code, 302)
        self.assertFalse(Pipeline.objects.filter(name='Nope').exists())

    def test_delete_cascades(self):
        Opportunity.objects.create(contact=self.jane, pipeline=self.pipeline, stage='Demo')

        self.client.post(reverse('pipelines:pipeline_delete', args=[self.pipeline.pk]))

        self.assertFalse(Pipeline.objects.filter(pk=self.pipeline.pk).exists())
        self.assertFalse(Opportunity.objects.exists())
