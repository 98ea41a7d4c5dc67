from django.conf import settings
from django.db import models
from django.urls import reverse
from taggit.managers import TaggableManager
from taggit.models import ItemBase

from apps.core.models import Account, Tag


class TaggedContact(ItemBase):
    """Through model linking contacts to core.Tag."""

    content_object = models.ForeignKey('Contact', on_delete=models.CASCADE)
    tag = models.ForeignKey(Tag, on_delete=models.CASCADE, related_name="%(app_label)s_%(class)s_items")


class Contact(models.Model):

    LEAD_SCORE_CHOICES = [
        ('hot', 'Hot'),
        ('warm', 'Warm'),
        ('cold', 'Cold'),
    ]

    account = models.ForeignKey(Account, on_delete=models.CASCADE, related_name='contacts', help_text='Sub-account that owns this contact')

    # Identity
    name = models.CharField(max_length=200, help_text="Contact's full name")
    email = models.EmailField(blank=True, help_text='Email address (optional)')
    phone = models.CharField(max_length=40, blank=True, db_index=True, help_text='Phone number')
    business_name = models.CharField(max_length=200, blank=True)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    postal_code = models.CharField(max_length=20, blank=True)
    website = models.CharField(max_length=255, blank=True)
    linkedin_url = models.CharField(max_length=255, blank=True)
    source = models.CharField(max_length=100, blank=True, help_text='Where did this contact come from?')
    notes = models.TextField(blank=True)

    # Stored category, set by hand; not derived from the computed score
    lead_score = models.CharField(max_length=10, choices=LEAD_SCORE_CHOICES, null=True, blank=True, db_index=True,
                                  help_text='Hot / warm / cold label chosen by the owner')

    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                              related_name='contacts', help_text='Who is responsible for this contact')
    last_contacted_at = models.DateTimeField(null=True, blank=True, help_text='Updated every time an activity is logged')

    tags = TaggableManager(through=TaggedContact, blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Contact'
        verbose_name_plural = 'Contacts'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['account', 'lead_score'], name='contact_account_score_idx'),
            models.Index(fields=['account', 'owner'], name='contact_account_owner_idx'),
            models.Index(fields=['account', '-created_at'], name='contact_account_created_idx'),
        ]

    def __str__(self):
        return self.name

    def get_absolute_url(self):
        return reverse('contacts:contact_detail', kwargs={'pk': self.pk})

    def get_initials(self):
        """Returns first letters for avatar: 'Jane Doe' → 'JD'"""
        parts = self.name.split()
        if len(parts) >= 2:
            return f"{parts[0][0]}{parts[1][0]}".upper()
        elif len(parts) == 1:
            return parts[0][0].upper()
        return "?"

    def score_breakdown(self, now=None):
        """Computed lead score for this contact (see contacts.scoring)."""
        from .scoring import score_breakdown

        return score_breakdown(
            activities=self.activities.all(),
            appointments=self.appointments.all(),
            opportunities=self.opportunities.order_by('-created_at'),
            last_contacted_at=self.last_contacted_at,
            now=now,
        )


class Activity(models.Model):
    """An outreach attempt. Append-only: rows are never edited."""

    OUTCOME_CHOICES = [
        ('Answered', 'Answered'),
        ('No Answer', 'No Answer'),
        ('Voicemail', 'Voicemail'),
        ('Not Interested', 'Not Interested'),
        ('Callback', 'Callback'),
        ('Meeting Booked', 'Meeting Booked'),
        ('Left Message', 'Left Message'),
        ('Wrong Number', 'Wrong Number'),
    ]

    CHANNEL_CHOICES = [
        ('Phone', 'Phone'),
        ('LinkedIn', 'LinkedIn'),
        ('Email', 'Email'),
    ]

    contact = models.ForeignKey(Contact, on_delete=models.CASCADE, related_name='activities')
    opportunity = models.ForeignKey('pipelines.Opportunity', on_delete=models.SET_NULL, null=True, blank=True,
                                    related_name='activities')
    outcome = models.CharField(max_length=30, choices=OUTCOME_CHOICES)
    channel = models.CharField(max_length=20, choices=CHANNEL_CHOICES, default='Phone')
    notes = models.TextField(blank=True)
    next_action = models.CharField(max_length=255, blank=True, help_text='What happens next')
    logged_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                                  related_name='logged_activities')
    logged_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = 'Activity'
        verbose_name_plural = 'Activities'
        ordering = ['-logged_at']
        indexes = [
            models.Index(fields=['contact', '-logged_at'], name='activity_contact_logged_idx'),
            models.Index(fields=['logged_by', '-logged_at'], name='activity_user_logged_idx'),
        ]

    def __str__(self):
        return f"{self.outcome} via {self.channel} ({self.contact})"
