from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError

from apps.accounts.models import User
from apps.core.models import Tag
from apps.pipelines.models import Opportunity
from .csv_io import IMPORT_FIELDS
from .models import Contact, Activity


def _owner_queryset(account):
    return User.objects.filter(account=account, is_active=True).order_by('first_name', 'last_name')


class ContactForm(forms.ModelForm):
    class Meta:
        model = Contact
        fields = ['name', 'email', 'phone', 'business_name', 'address', 'city', 'postal_code',
                  'website', 'linkedin_url', 'source', 'lead_score', 'owner', 'tags', 'notes']

        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Jane Doe', 'autofocus': True}),
            'email': forms.EmailInput(attrs={'class': 'form-control', 'placeholder': 'jane@example.com', 'dir': 'ltr'}),
            'phone': forms.TextInput(attrs={'class': 'form-control', 'placeholder': '(555) 123-4567', 'dir': 'ltr'}),
            'business_name': forms.TextInput(attrs={'class': 'form-control'}),
            'address': forms.TextInput(attrs={'class': 'form-control'}),
            'city': forms.TextInput(attrs={'class': 'form-control'}),
            'postal_code': forms.TextInput(attrs={'class': 'form-control'}),
            'website': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'https://'}),
            'linkedin_url': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'https://linkedin.com/in/...'}),
            'source': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Referral, Website, Cold List'}),
            'lead_score': forms.Select(attrs={'class': 'form-select'}),
            'owner': forms.Select(attrs={'class': 'form-select'}),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 4, 'placeholder': 'Add any notes here...'}),
        }

        help_texts = {
            'tags': 'Comma-separated list of tags',
            'owner': 'Team member responsible for this contact',
        }

        error_messages = {
            'name': {'required': 'Name is required', 'max_length': 'Name is too long (max 200 characters)'},
        }

    def __init__(self, *args, **kwargs):
        self.account = kwargs.pop('account', None)
        super().__init__(*args, **kwargs)

        if self.account:
            self.fields['owner'].queryset = _owner_queryset(self.account)
        self.fields['owner'].empty_label = "Unassigned"
        self.fields['lead_score'].choices = [('', 'No score')] + Contact.LEAD_SCORE_CHOICES
        self.fields['tags'].widget.attrs.update({'class': 'form-control', 'placeholder': 'vip, referral'})

    def clean_name(self):
        name = self.cleaned_data.get('name', '').strip()
        if not name:
            raise ValidationError('Name is required')
        return name

    def clean_email(self):
        email = self.cleaned_data.get('email')
        return email.strip().lower() if email else ''

    def clean_lead_score(self):
        return self.cleaned_data.get('lead_score') or None


class ContactFilterForm(forms.Form):
    PHONE_CHOICES = [('', 'Any phone'), ('yes', 'Has phone'), ('no', 'No phone')]
    EMAIL_CHOICES = [('', 'Any email'), ('yes', 'Has email'), ('no', 'No email')]

    search = forms.CharField(required=False, label='Search', widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Search by name, email, phone or business...'}))
    phone = forms.ChoiceField(choices=PHONE_CHOICES, required=False, widget=forms.Select(attrs={'class': 'form-select'}))
    email = forms.ChoiceField(choices=EMAIL_CHOICES, required=False, widget=forms.Select(attrs={'class': 'form-select'}))
    has_linkedin = forms.BooleanField(required=False, label='Has LinkedIn', widget=forms.CheckboxInput(attrs={'class': 'form-check-input'}))
    lead_score = forms.ChoiceField(choices=[('', 'All Scores')] + Contact.LEAD_SCORE_CHOICES, required=False, label='Lead Score', widget=forms.Select(attrs={'class': 'form-select'}))
    owner = forms.ModelChoiceField(queryset=User.objects.none(), required=False, label='Owner', empty_label='All Owners', widget=forms.Select(attrs={'class': 'form-select'}))
    tag = forms.ModelChoiceField(queryset=Tag.objects.all(), required=False, label='Tag', empty_label='All Tags', widget=forms.Select(attrs={'class': 'form-select'}))

    def __init__(self, *args, **kwargs):
        account = kwargs.pop('account', None)
        super().__init__(*args, **kwargs)
        if account:
            self.fields['owner'].queryset = _owner_queryset(account)

    def filter(self, queryset):
        """Apply the cleaned filters to a contact queryset."""
        from django.db.models import Q

        data = self.cleaned_data
        search = (data.get('search') or '').strip()
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(email__icontains=search) |
                Q(phone__icontains=search) |
                Q(business_name__icontains=search)
            )

        if data.get('phone') == 'yes':
            queryset = queryset.exclude(phone='')
        elif data.get('phone') == 'no':
            queryset = queryset.filter(phone='')

        if data.get('email') == 'yes':
            queryset = queryset.exclude(email='')
        elif data.get('email') == 'no':
            queryset = queryset.filter(email='')

        if data.get('has_linkedin'):
            queryset = queryset.exclude(linkedin_url='')

        if data.get('lead_score'):
            queryset = queryset.filter(lead_score=data['lead_score'])

        if data.get('owner'):
            queryset = queryset.filter(owner=data['owner'])

        if data.get('tag'):
            queryset = queryset.filter(tags__in=[data['tag']]).distinct()

        return queryset


class ActivityForm(forms.ModelForm):
    next_follow_up = forms.DateField(
        required=False,
        label='Next Follow-up',
        help_text='Sets the follow-up date of the selected opportunity',
        widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}),
    )

    class Meta:
        model = Activity
        fields = ['outcome', 'channel', 'opportunity', 'notes', 'next_action']
        widgets = {
            'outcome': forms.Select(attrs={'class': 'form-select'}),
            'channel': forms.Select(attrs={'class': 'form-select'}),
            'opportunity': forms.Select(attrs={'class': 'form-select'}),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 3, 'placeholder': 'What happened?'}),
            'next_action': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Send proposal'}),
        }
        error_messages = {
            'outcome': {'required': 'Select an outcome'},
        }

    def __init__(self, *args, **kwargs):
        self.contact = kwargs.pop('contact', None)
        super().__init__(*args, **kwargs)
        if self.contact is not None:
            self.fields['opportunity'].queryset = Opportunity.objects.filter(contact=self.contact).select_related('pipeline')
        else:
            self.fields['opportunity'].queryset = Opportunity.objects.none()
        self.fields['opportunity'].required = False
        self.fields['opportunity'].empty_label = 'No opportunity'

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('next_follow_up') and not cleaned_data.get('opportunity'):
            raise ValidationError({'next_follow_up': 'Select an opportunity to set its follow-up date'})
        return cleaned_data


class ContactImportForm(forms.Form):
    file = forms.FileField(label='CSV File', help_text='Comma-separated file with a header row - Max 5MB', widget=forms.FileInput(attrs={'class': 'form-control', 'accept': '.csv'}))

    def clean_file(self):
        file = self.cleaned_data.get('file')
        if file:
            if not file.name.lower().endswith('.csv'):
                raise ValidationError('Unsupported file type. Please upload a CSV (.csv) file')

            max_size = getattr(settings, 'CONTACT_IMPORT_MAX_FILE_SIZE', 5 * 1024 * 1024)
            if file.size > max_size:
                max_mb = max_size / (1024 * 1024)
                raise ValidationError(f'File size is too large. Maximum {max_mb:.0f}MB allowed')
        return file


class ColumnMappingForm(forms.Form):
    """One select per CSV header (``col_<index>``), pre-filled from the auto mapping."""

    FIELD_CHOICES = [('', "Don't import")] + IMPORT_FIELDS

    owner = forms.ModelChoiceField(queryset=User.objects.none(), required=False, label='Assign To (Optional)', empty_label='No owner', widget=forms.Select(attrs={'class': 'form-select'}))

    def __init__(self, *args, headers=(), initial_mapping=None, account=None, **kwargs):
        super().__init__(*args, **kwargs)
        initial_mapping = initial_mapping or {}
        self.headers = list(headers)
        for index, header in enumerate(self.headers):
            self.fields[f'col_{index}'] = forms.ChoiceField(
                choices=self.FIELD_CHOICES,
                required=False,
                label=header or f'Column {index + 1}',
                initial=initial_mapping.get(index, ''),
                widget=forms.Select(attrs={'class': 'form-select'}),
            )
        if account:
            self.fields['owner'].queryset = _owner_queryset(account)

    def column_fields(self):
        return [self[f'col_{index}'] for index in range(len(self.headers))]

    def clean(self):
        cleaned_data = super().clean()
        chosen = [cleaned_data.get(f'col_{i}') for i in range(len(self.headers))]
        chosen = [field for field in chosen if field]
        if 'name' not in chosen:
            raise ValidationError('Map a column to Name before importing.')
        duplicates = {field for field in chosen if chosen.count(field) > 1}
        if duplicates:
            raise ValidationError(f'Each field can be mapped once: {", ".join(sorted(duplicates))}')
        return cleaned_data

    def get_mapping(self):
        return {
            index: self.cleaned_data[f'col_{index}']
            for index in range(len(self.headers))
            if self.cleaned_data.get(f'col_{index}')
        }
