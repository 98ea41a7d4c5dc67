from django.contrib.auth import get_user_model
from django.test import TestCase, Client as HttpClient
from django.urls import reverse

from apps.agency.models import Client, PropertyListing, ContentAsset
from apps.core.models import Account

User = get_user_model()


class AgencyViewTestMixin:

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

        self.harbor = Client.objects.create(name='Harbor Homes', subscription_status='active', monthly_fee=500)
        self.summit = Client.objects.create(name='Summit Realty', subscription_status='trial', monthly_fee=300)


class ClientViewsTest(AgencyViewTestMixin, TestCase):

    def test_list_totals(self):
        response = self.http.get(reverse('agency:client_list'))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['active_count'], 1)
        self.assertEqual(response.context['monthly_revenue'], 500)

    def test_status_filter(self):
        response = self.http.get(reverse('agency:client_list'), {'status': 'trial'})
        self.assertEqual(list(response.context['clients']), [self.summit])

    def test_create(self):
        response = self.http.post(reverse('agency:client_create'), {
            'name': 'Coastline Group',
            'subscription_tier': 'enterprise',
            'subscription_status': 'active',
        })

        self.assertRedirects(response, reverse('agency:client_list'))
        self.assertTrue(Client.objects.filter(name='Coastline Group').exists())

    def test_agent_can_read_but_not_write(self):
        self.http.force_login(self.agent)

        self.assertEqual(self.http.get(reverse('agency:client_list')).status_code, 200)

        response = self.http.post(reverse('agency:client_delete', args=[self.harbor.pk]))
        self.assertRedirects(response, reverse('core:dashboard'), fetch_redirect_response=False)
        self.assertTrue(Client.objects.filter(pk=self.harbor.pk).exists())

    def test_delete_cascades_to_listings(self):
        PropertyListing.objects.create(client=self.harbor, address='12 Bay Street')

        self.http.post(reverse('agency:client_delete', args=[self.harbor.pk]))

        self.assertFalse(PropertyListing.objects.exists())


class PropertyViewsTest(AgencyViewTestMixin, TestCase):

    def test_filters(self):
        condo = PropertyListing.objects.create(client=self.harbor, address='1 Pier Rd', property_type='condo')
        PropertyListing.objects.create(client=self.summit, address='9 Ridge Ln', property_type='land', listing_status='sold')

        response = self.http.get(reverse('agency:property_list'), {'property_type': 'condo'})
        self.assertEqual(list(response.context['properties']), [condo])

        response = self.http.get(reverse('agency:property_list'), {'client': self.summit.pk})
        self.assertEqual(response.context['properties'].count(), 1)

    def test_create_prefills_client(self):
        response = self.http.get(reverse('agency:property_create'), {'client': self.harbor.pk})
        self.assertEqual(response.context['form'].initial['client'], str(self.harbor.pk))


class ContentViewsTest(AgencyViewTestMixin, TestCase):

    def test_client_filter_includes_global_assets(self):
        own = ContentAsset.objects.create(name='Harbor Logo', asset_type='brand_kit', client=self.harbor)
        shared = ContentAsset.objects.create(name='Market Report', asset_type='document', is_global=True)
        ContentAsset.objects.create(name='Summit Logo', asset_type='brand_kit', client=self.summit)

        response = self.http.get(reverse('agency:content_list'), {'client': self.harbor.pk})

        self.assertEqual(set(response.context['assets']), {own, shared})

    def test_type_filter(self):
        ContentAsset.objects.create(name='Intro Video', asset_type='video')
        ContentAsset.objects.create(name='Flyer', asset_type='template')

        response = self.http.get(reverse('agency:content_list'), {'asset_type': 'video'})

        self.assertEqual([asset.name for asset in response.context['assets']], ['Intro Video'])
