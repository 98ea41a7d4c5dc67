"""
Reports
=======

Month-over-month KPIs for one sub-account: contact growth, pipeline value
per pipeline and stage, outreach volume by outcome and owner, appointment
show-up rate, and the lead score mix. "This month" is the calendar month
of ``today`` in TIME_ZONE; trends compare it with the previous month.
"""
from datetime import timedelta

from django.db.models import Count, Sum, Q
from django.utils import timezone

from apps.appointments.models import Appointment
from apps.contacts.models import Contact, Activity
from apps.pipelines.models import Pipeline, Opportunity


def month_start(day):
    return day.replace(day=1)


def previous_month_start(day):
    return month_start(month_start(day) - timedelta(days=1))


def next_month_start(day):
    return month_start(month_start(day) + timedelta(days=32))


def percent_change(current, previous):
    """Whole-number percentage change; 0 when there is no previous value."""
    if not previous:
        return 0
    return round((current - previous) / previous * 100)


def show_up_rate(showed_up, booked):
    if not booked:
        return 0
    return round(showed_up / booked * 100)


def _month_range(field, start, end):
    return Q(**{f'{field}__date__gte': start, f'{field}__date__lt': end})


def pipeline_breakdown(account):
    """Count and value per stage for each pipeline, in stage order."""
    rows = (
        Opportunity.objects.filter(pipeline__account=account)
        .values('pipeline', 'stage')
        .annotate(count=Count('id'), value=Sum('opportunity_value'))
        .order_by()
    )
    by_key = {(row['pipeline'], row['stage']): row for row in rows}

    breakdown = []
    for pipeline in Pipeline.objects.filter(account=account):
        stages = []
        for stage in pipeline.stages:
            row = by_key.get((pipeline.pk, stage), {})
            stages.append({
                'name': stage,
                'count': row.get('count', 0),
                'value': row.get('value') or 0,
            })
        breakdown.append({
            'pipeline': pipeline,
            'stages': stages,
            'total': sum(stage['count'] for stage in stages),
            'total_value': sum(stage['value'] for stage in stages),
        })
    return breakdown


def build_report(account, today=None):
    today = today or timezone.localdate()
    this_month = month_start(today)
    last_month = previous_month_start(today)
    following_month = next_month_start(today)

    contacts = Contact.objects.filter(account=account)
    contact_counts = contacts.aggregate(
        total=Count('id'),
        this_month=Count('id', filter=_month_range('created_at', this_month, following_month)),
        last_month=Count('id', filter=_month_range('created_at', last_month, this_month)),
    )

    opportunities = Opportunity.objects.filter(pipeline__account=account)
    opportunity_totals = opportunities.aggregate(total=Count('id'), value=Sum('opportunity_value'))

    activities = Activity.objects.filter(contact__account=account)
    activity_counts = activities.aggregate(
        total=Count('id'),
        this_month=Count('id', filter=_month_range('logged_at', this_month, following_month)),
        last_month=Count('id', filter=_month_range('logged_at', last_month, this_month)),
    )

    # Show-up rate uses appointments dated in the month, completed = showed up
    completed = Q(status=Appointment.STATUS_COMPLETED)
    appointment_counts = Appointment.objects.filter(contact__account=account).aggregate(
        booked=Count('id', filter=_month_range('datetime', this_month, following_month)),
        showed_up=Count('id', filter=completed & _month_range('datetime', this_month, following_month)),
        last_booked=Count('id', filter=_month_range('datetime', last_month, this_month)),
        last_showed_up=Count('id', filter=completed & _month_range('datetime', last_month, this_month)),
    )
    current_rate = show_up_rate(appointment_counts['showed_up'], appointment_counts['booked'])
    last_rate = show_up_rate(appointment_counts['last_showed_up'], appointment_counts['last_booked'])

    activity_by_outcome = list(
        activities.values('outcome').annotate(count=Count('id')).order_by('-count', 'outcome')
    )
    activity_by_owner = list(
        activities.filter(logged_by__isnull=False)
        .values('logged_by', 'logged_by__first_name', 'logged_by__last_name', 'logged_by__email')
        .annotate(
            total=Count('id'),
            this_month=Count('id', filter=_month_range('logged_at', this_month, following_month)),
            meetings=Count('id', filter=Q(outcome='Meeting Booked')),
        )
        .order_by('-total')
    )

    scores = dict(contacts.values_list('lead_score').annotate(count=Count('id')).order_by())
    lead_score_distribution = [
        {'score': label, 'count': scores.get(value, 0)}
        for value, label in Contact.LEAD_SCORE_CHOICES
    ]
    lead_score_distribution.append({'score': 'Unscored', 'count': scores.get(None, 0)})

    return {
        'month': this_month,
        'total_contacts': contact_counts['total'],
        'new_contacts_this_month': contact_counts['this_month'],
        'new_contacts_last_month': contact_counts['last_month'],
        'contacts_trend': percent_change(contact_counts['this_month'], contact_counts['last_month']),
        'total_opportunities': opportunity_totals['total'],
        'pipeline_value': opportunity_totals['value'] or 0,
        'total_activities': activity_counts['total'],
        'activities_this_month': activity_counts['this_month'],
        'activities_last_month': activity_counts['last_month'],
        'activities_trend': percent_change(activity_counts['this_month'], activity_counts['last_month']),
        'appointments_booked': appointment_counts['booked'],
        'appointments_showed_up': appointment_counts['showed_up'],
        'show_up_rate': current_rate,
        'last_month_show_up_rate': last_rate,
        'show_up_trend': current_rate - last_rate,
        'activity_by_outcome': activity_by_outcome,
        'activity_by_owner': activity_by_owner,
        'pipelines': pipeline_breakdown(account),
        'lead_score_distribution': lead_score_distribution,
    }
