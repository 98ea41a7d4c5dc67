from django import forms
from django.core.exceptions import ValidationError

from apps.accounts.models import User
from apps.contacts.models import Contact
from apps.pipelines.models import Opportunity
from .models import Appointment


class AppointmentForm(forms.ModelForm):
    class Meta:
        model = Appointment
        fields = ['contact', 'opportunity', 'title', 'datetime', 'location', 'assigned_to', 'notes']
        widgets = {
            'contact': forms.Select(attrs={'class': 'form-select'}),
            'opportunity': forms.Select(attrs={'class': 'form-select'}),
            'title': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Discovery call'}),
            'datetime': forms.DateTimeInput(attrs={'class': 'form-control', 'type': 'datetime-local'}, format='%Y-%m-%dT%H:%M'),
            'location': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Office, Zoom link, phone...'}),
            'assigned_to': forms.Select(attrs={'class': 'form-select'}),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
        }
        labels = {
            'datetime': 'Date & Time',
            'assigned_to': 'Assigned To',
        }

    def __init__(self, *args, **kwargs):
        account = kwargs.pop('account', None)
        super().__init__(*args, **kwargs)
        self.fields['datetime'].input_formats = ['%Y-%m-%dT%H:%M', '%Y-%m-%d %H:%M', '%Y-%m-%d %H:%M:%S']
        self.fields['contact'].queryset = Contact.objects.filter(account=account).order_by('name')
        self.fields['opportunity'].queryset = Opportunity.objects.filter(pipeline__account=account).select_related('contact', 'pipeline')
        self.fields['opportunity'].required = False
        self.fields['opportunity'].empty_label = 'None'
        self.fields['assigned_to'].queryset = User.objects.filter(account=account, is_active=True)
        self.fields['assigned_to'].empty_label = 'Unassigned'

    def clean(self):
        cleaned_data = super().clean()
        contact = cleaned_data.get('contact')
        opportunity = cleaned_data.get('opportunity')
        if contact and opportunity and opportunity.contact_id != contact.pk:
            raise ValidationError({'opportunity': 'This opportunity belongs to another contact'})
        return cleaned_data


class AppointmentEditForm(AppointmentForm):
    """Edit form; unlike the status action it may set any status."""

    class Meta(AppointmentForm.Meta):
        fields = AppointmentForm.Meta.fields + ['status']
        widgets = dict(AppointmentForm.Meta.widgets, status=forms.Select(attrs={'class': 'form-select'}))
