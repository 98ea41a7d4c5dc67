"""
Lead scoring
============

Computes a numeric engagement score for a contact from its activities,
appointments, opportunities and the time since it was last contacted.

The computation is pure: same inputs and the same ``now`` always give the
same score, nothing is written to the database, and every input may be
empty or ``None``. The score is shown next to the stored hot/warm/cold
``Contact.lead_score`` label and never overwrites it.

Buckets (max points):
    Activities              5 per activity                   (30)
    Meetings Booked         10 per "Meeting Booked" outcome  (30)
    Positive Outcomes       3 per Answered / Callback        (15)
    Contact Recency         15 / 10 / 5 / -10 by age         (15)
    Pipeline Stage          10 in pipeline, +15 late, +10 mid (25)
    Completed Appointments  15 if any appointment completed  (15)
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from datetime import timezone as dt_timezone
from typing import List, Optional

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime


MEETING_OUTCOME = 'Meeting Booked'
POSITIVE_OUTCOMES = ('Answered', 'Callback')
LATE_STAGES = ('Proposal', 'Negotiation', 'Closed Won')
MID_STAGES = ('Discovery', 'Demo', 'Trial')
COMPLETED_STATUS = 'completed'


@dataclass
class ScoreComponent:
    label: str
    detail: str
    points: int
    max_points: int


@dataclass
class ScoreBreakdown:
    components: List[ScoreComponent] = field(default_factory=list)
    days_since_contact: Optional[int] = None

    @property
    def total(self):
        return sum(c.points for c in self.components)

    def as_dict(self):
        return {
            'total': self.total,
            'days_since_contact': self.days_since_contact,
            'components': [
                {
                    'label': c.label,
                    'detail': c.detail,
                    'points': c.points,
                    'max': c.max_points,
                }
                for c in self.components
            ],
        }


def _value(item, name):
    # Accept model instances as well as plain dicts (JSON payloads)
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def _to_datetime(value):
    """Coerce a datetime, date or ISO string to an aware datetime, or None."""
    if value is None or value == '':
        return None

    if isinstance(value, str):
        parsed = parse_datetime(value.strip())
        if parsed is None:
            parsed_date = parse_date(value.strip())
            if parsed_date is None:
                return None
            value = parsed_date
        else:
            value = parsed

    if isinstance(value, datetime):
        result = value
    elif isinstance(value, date):
        result = datetime.combine(value, time.min)
    else:
        return None

    if timezone.is_naive(result):
        result = result.replace(tzinfo=dt_timezone.utc)
    return result


def days_since(last_contacted_at, now=None):
    """Whole days (floored) between ``last_contacted_at`` and ``now``."""
    last = _to_datetime(last_contacted_at)
    if last is None:
        return None
    current = _to_datetime(now) if now is not None else timezone.now()
    return (current - last) // timedelta(days=1)


def recency_points(days):
    if days is None:
        return 0
    if days <= 7:
        return 15
    if days <= 14:
        return 10
    if days <= 30:
        return 5
    return -10


def score_breakdown(activities=None, appointments=None, opportunities=None,
                    last_contacted_at=None, now=None):
    """
    Score every bucket and return a ScoreBreakdown.

    ``opportunities`` must be ordered newest first; the first item decides
    the stage bonus.
    """
    activities = list(activities or [])
    appointments = list(appointments or [])
    opportunities = list(opportunities or [])

    outcomes = [_value(a, 'outcome') for a in activities]

    activity_count = len(activities)
    meetings = sum(1 for o in outcomes if o == MEETING_OUTCOME)
    positive = sum(1 for o in outcomes if o in POSITIVE_OUTCOMES)

    days = days_since(last_contacted_at, now)

    in_pipeline = bool(opportunities)
    pipeline_points = 0
    pipeline_detail = 'Not in pipeline'
    if in_pipeline:
        pipeline_points = 10
        stage = _value(opportunities[0], 'stage') or ''
        pipeline_detail = stage or 'In pipeline'
        if stage in LATE_STAGES:
            pipeline_points += 15
        elif stage in MID_STAGES:
            pipeline_points += 10

    completed = sum(1 for a in appointments if _value(a, 'status') == COMPLETED_STATUS)

    components = [
        ScoreComponent('Activities', f'{activity_count} logged', min(activity_count * 5, 30), 30),
        ScoreComponent('Meetings Booked', f'{meetings} meetings', min(meetings * 10, 30), 30),
        ScoreComponent('Positive Outcomes', f'{positive} positive', min(positive * 3, 15), 15),
        ScoreComponent(
            'Contact Recency',
            f'{days} days ago' if days is not None else 'Never contacted',
            recency_points(days),
            15,
        ),
        ScoreComponent('Pipeline Stage', pipeline_detail, pipeline_points, 25),
        ScoreComponent('Completed Appointments', f'{completed} completed', 15 if completed else 0, 15),
    ]

    return ScoreBreakdown(components=components, days_since_contact=days)


def compute_lead_score(activities=None, appointments=None, opportunities=None,
                       last_contacted_at=None, now=None):
    """Total lead score (may be negative when the contact has gone stale)."""
    return score_breakdown(activities, appointments, opportunities, last_contacted_at, now).total
