"""
Lead Scoring Tests
==================

The scoring functions are pure, so most tests feed plain dicts and a
fixed ``now``. The last class checks Contact.score_breakdown() against
real rows.

Run tests:
    python manage.py test apps.contacts.tests.test_scoring
"""

from datetime import datetime, timedelta, timezone as dt_timezone

from django.test import TestCase
from django.utils import timezone

from apps.contacts.models import Contact, Activity
from apps.contacts.scoring import score_breakdown, compute_lead_score, days_since, recency_points
from apps.core.models import Account
from apps.pipelines.models import Pipeline, Opportunity

NOW = datetime(2026, 10, 17, 12, 0, tzinfo=dt_timezone.utc)


def activities(*outcomes):
    return [{'outcome': outcome} for outcome in outcomes]


class ComputeLeadScoreTest(TestCase):
    """Bucket arithmetic of compute_lead_score"""

    def test_no_inputs_scores_zero(self):
        """Nothing logged and never contacted gives exactly 0"""
        self.assertEqual(compute_lead_score(now=NOW), 0)
        self.assertEqual(compute_lead_score([], [], [], None, now=NOW), 0)

    def test_none_inputs_are_accepted(self):
        self.assertEqual(compute_lead_score(None, None, None, None, now=NOW), 0)

    def test_maxed_out_contact_scores_100(self):
        """10 activities (5 meetings), contacted 3 days ago, one Proposal opportunity"""
        outcomes = ['Meeting Booked'] * 5 + ['No Answer', 'Voicemail', 'Left Message', 'Wrong Number', 'Not Interested']

        breakdown = score_breakdown(
            activities=activities(*outcomes),
            appointments=[],
            opportunities=[{'stage': 'Proposal'}],
            last_contacted_at=NOW - timedelta(days=3),
            now=NOW,
        )

        points = {c.label: c.points for c in breakdown.components}
        self.assertEqual(points['Activities'], 30)
        self.assertEqual(points['Meetings Booked'], 30)
        self.assertEqual(points['Positive Outcomes'], 0)
        self.assertEqual(points['Contact Recency'], 15)
        self.assertEqual(points['Pipeline Stage'], 25)
        self.assertEqual(points['Completed Appointments'], 0)
        self.assertEqual(breakdown.total, 100)

    def test_buckets_are_capped(self):
        outcomes = ['Answered'] * 20
        breakdown = score_breakdown(activities=activities(*outcomes), now=NOW)

        points = {c.label: c.points for c in breakdown.components}
        self.assertEqual(points['Activities'], 30)
        self.assertEqual(points['Positive Outcomes'], 15)

    def test_stale_contact_goes_negative(self):
        """Only the recency penalty applies"""
        score = compute_lead_score(last_contacted_at=NOW - timedelta(days=45), now=NOW)
        self.assertEqual(score, -10)

    def test_mid_stage_bonus(self):
        score = compute_lead_score(opportunities=[{'stage': 'Demo'}], now=NOW)
        self.assertEqual(score, 20)

    def test_unknown_stage_only_counts_pipeline_membership(self):
        score = compute_lead_score(opportunities=[{'stage': 'Contacted'}], now=NOW)
        self.assertEqual(score, 10)

    def test_newest_opportunity_decides_stage_bonus(self):
        score = compute_lead_score(opportunities=[{'stage': 'Contacted'}, {'stage': 'Proposal'}], now=NOW)
        self.assertEqual(score, 10)

    def test_completed_appointment_counts_once(self):
        appointments = [{'status': 'completed'}, {'status': 'completed'}, {'status': 'cancelled'}]
        self.assertEqual(compute_lead_score(appointments=appointments, now=NOW), 15)

    def test_deterministic(self):
        kwargs = dict(
            activities=activities('Answered', 'Callback', 'Meeting Booked'),
            appointments=[{'status': 'completed'}],
            opportunities=[{'stage': 'Negotiation'}],
            last_contacted_at=NOW - timedelta(days=10),
            now=NOW,
        )
        self.assertEqual(compute_lead_score(**kwargs), compute_lead_score(**kwargs))

    def test_iso_string_dates(self):
        score = compute_lead_score(last_contacted_at='2026-10-15T09:00:00Z', now=NOW)
        self.assertEqual(score, 15)

    def test_unparseable_date_is_treated_as_never_contacted(self):
        self.assertEqual(compute_lead_score(last_contacted_at='not a date', now=NOW), 0)


class RecencyTest(TestCase):

    def test_bands(self):
        self.assertEqual(recency_points(None), 0)
        self.assertEqual(recency_points(0), 15)
        self.assertEqual(recency_points(7), 15)
        self.assertEqual(recency_points(8), 10)
        self.assertEqual(recency_points(14), 10)
        self.assertEqual(recency_points(30), 5)
        self.assertEqual(recency_points(31), -10)

    def test_days_since_floors(self):
        self.assertEqual(days_since(NOW - timedelta(days=2, hours=23), now=NOW), 2)
        self.assertIsNone(days_since(None, now=NOW))


class ContactScoreBreakdownTest(TestCase):
    """Contact.score_breakdown() reads the contact's related rows"""

    def setUp(self):
        self.account = Account.objects.create(name='Acme Realty')
        self.pipeline = Pipeline.objects.create(
            account=self.account,
            name='Sales',
            stages=['New Lead', 'Demo', 'Proposal'],
        )
        self.contact = Contact.objects.create(
            account=self.account,
            name='Jane Doe',
            lead_score='cold',
            last_contacted_at=timezone.now() - timedelta(days=1),
        )

    def test_breakdown_from_rows(self):
        Activity.objects.create(contact=self.contact, outcome='Answered', channel='Phone')
        Activity.objects.create(contact=self.contact, outcome='Meeting Booked', channel='Phone')
        Opportunity.objects.create(contact=self.contact, pipeline=self.pipeline, stage='Demo')

        breakdown = self.contact.score_breakdown()

        # 10 activities + 10 meeting + 3 positive + 15 recency + 20 stage
        self.assertEqual(breakdown.total, 58)
        self.assertEqual(breakdown.days_since_contact, 1)

    def test_stored_category_is_untouched(self):
        Activity.objects.create(contact=self.contact, outcome='Meeting Booked', channel='Phone')
        self.contact.score_breakdown()

        self.contact.refresh_from_db()
        self.assertEqual(self.contact.lead_score, 'cold')
