from django.conf import settings
from django.db import models
from django.utils import timezone


class Client(models.Model):
    """An agency customer (the business the agency builds and markets for)."""

    COMPANY_TYPE_CHOICES = [
        ('solo_agent', 'Solo Agent'),
        ('team', 'Team'),
        ('brokerage', 'Brokerage'),
    ]

    TIER_CHOICES = [
        ('starter', 'Starter'),
        ('professional', 'Professional'),
        ('enterprise', 'Enterprise'),
    ]

    SUBSCRIPTION_STATUS_CHOICES = [
        ('active', 'Active'),
        ('paused', 'Paused'),
        ('cancelled', 'Cancelled'),
        ('trial', 'Trial'),
    ]

    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=40, blank=True)
    company_name = models.CharField(max_length=200, blank=True)
    company_type = models.CharField(max_length=20, choices=COMPANY_TYPE_CHOICES, blank=True)
    website_url = models.URLField(blank=True)
    logo_url = models.URLField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)

    subscription_tier = models.CharField(max_length=20, choices=TIER_CHOICES, default='starter')
    subscription_status = models.CharField(max_length=20, choices=SUBSCRIPTION_STATUS_CHOICES, default='trial', db_index=True)
    monthly_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    contract_start_date = models.DateField(null=True, blank=True)
    contract_end_date = models.DateField(null=True, blank=True)

    notes = models.TextField(blank=True)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                              related_name='clients')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Client'
        verbose_name_plural = 'Clients'
        ordering = ['name']

    def __str__(self):
        return self.name


class PropertyListing(models.Model):

    PROPERTY_TYPE_CHOICES = [
        ('single_family', 'Single Family'),
        ('condo', 'Condo'),
        ('townhouse', 'Townhouse'),
        ('multi_family', 'Multi Family'),
        ('land', 'Land'),
        ('commercial', 'Commercial'),
    ]

    LISTING_STATUS_CHOICES = [
        ('active', 'Active'),
        ('pending', 'Pending'),
        ('sold', 'Sold'),
        ('expired', 'Expired'),
        ('withdrawn', 'Withdrawn'),
    ]

    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name='properties')
    mls_number = models.CharField(max_length=50, blank=True)
    address = models.CharField(max_length=255)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    property_type = models.CharField(max_length=20, choices=PROPERTY_TYPE_CHOICES, blank=True)
    listing_status = models.CharField(max_length=20, choices=LISTING_STATUS_CHOICES, default='active', db_index=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    bedrooms = models.PositiveSmallIntegerField(null=True, blank=True)
    bathrooms = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    square_feet = models.PositiveIntegerField(null=True, blank=True)
    description = models.TextField(blank=True)
    featured_image_url = models.URLField(blank=True)
    virtual_tour_url = models.URLField(blank=True)
    is_featured = models.BooleanField(default=False)
    listed_date = models.DateField(null=True, blank=True)
    sold_date = models.DateField(null=True, blank=True)
    sold_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Property Listing'
        verbose_name_plural = 'Property Listings'
        ordering = ['-created_at']

    def __str__(self):
        return self.address


class ContentAsset(models.Model):

    ASSET_TYPE_CHOICES = [
        ('template', 'Template'),
        ('image', 'Image'),
        ('video', 'Video'),
        ('document', 'Document'),
        ('brand_kit', 'Brand Kit'),
    ]

    name = models.CharField(max_length=200)
    asset_type = models.CharField(max_length=20, choices=ASSET_TYPE_CHOICES, db_index=True)
    category = models.CharField(max_length=100, blank=True)
    file_url = models.URLField(blank=True)
    thumbnail_url = models.URLField(blank=True)
    description = models.TextField(blank=True)
    tags = models.JSONField(default=list, blank=True, help_text='List of keywords')
    client = models.ForeignKey(Client, on_delete=models.CASCADE, null=True, blank=True, related_name='content_assets')
    is_global = models.BooleanField(default=False, help_text='Available to every client')

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'Content Asset'
        verbose_name_plural = 'Content Assets'
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class Invoice(models.Model):
    """A bill sent to a client. Line items are ``{description, amount}`` dicts."""

    STATUS_DRAFT = 'draft'
    STATUS_SENT = 'sent'
    STATUS_PAID = 'paid'
    STATUS_OVERDUE = 'overdue'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_SENT, 'Sent'),
        (STATUS_PAID, 'Paid'),
        (STATUS_OVERDUE, 'Overdue'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    # Paid and cancelled invoices are final
    TRANSITIONS = {
        STATUS_DRAFT: {STATUS_SENT, STATUS_CANCELLED},
        STATUS_SENT: {STATUS_PAID, STATUS_OVERDUE, STATUS_CANCELLED},
        STATUS_OVERDUE: {STATUS_PAID, STATUS_CANCELLED},
    }

    OUTSTANDING_STATUSES = (STATUS_SENT, STATUS_OVERDUE)

    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name='invoices')
    invoice_number = models.CharField(max_length=20, unique=True, editable=False)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)
    due_date = models.DateField(null=True, blank=True)
    paid_date = models.DateField(null=True, blank=True)
    description = models.TextField(blank=True)
    line_items = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Invoice'
        verbose_name_plural = 'Invoices'
        ordering = ['-created_at']

    def __str__(self):
        return self.invoice_number

    def save(self, *args, **kwargs):
        if not self.invoice_number:
            self.invoice_number = self.next_number(timezone.localdate().year)
        super().save(*args, **kwargs)

    @classmethod
    def next_number(cls, year):
        """INV-<year>-<sequence>, one past the highest number issued that year."""
        prefix = f'INV-{year}-'
        last = (
            cls.objects.filter(invoice_number__startswith=prefix)
            .order_by('-invoice_number')
            .values_list('invoice_number', flat=True)
            .first()
        )
        sequence = int(last[len(prefix):]) + 1 if last else 1
        return f'{prefix}{sequence:04d}'

    def is_overdue(self, today=None):
        if self.status == self.STATUS_OVERDUE:
            return True
        today = today or timezone.localdate()
        return self.status == self.STATUS_SENT and self.due_date is not None and self.due_date < today

    def can_transition_to(self, status):
        return status in self.TRANSITIONS.get(self.status, set())

    def transition_to(self, status, today=None):
        """Change status through the draft → sent → paid guard; paying stamps ``paid_date``."""
        if not self.can_transition_to(status):
            raise ValueError(f'Cannot change invoice status from "{self.status}" to "{status}".')
        self.status = status
        if status == self.STATUS_PAID:
            self.paid_date = today or timezone.localdate()
        self.save(update_fields=['status', 'paid_date', 'updated_at'])
