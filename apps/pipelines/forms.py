from django import forms
from django.core.exceptions import ValidationError

from apps.accounts.models import User
from .models import Pipeline


def _owner_queryset(account):
    return User.objects.filter(account=account, is_active=True).order_by('first_name', 'last_name')


class PipelineForm(forms.ModelForm):
    """Pipeline name plus its stages, edited as one stage per line."""

    stages_text = forms.CharField(
        label='Stages',
        help_text='One stage per line, in board order. Renaming a stage leaves existing '
                  'opportunities on the old name.',
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 10}),
        error_messages={'required': 'Add at least one stage'},
    )

    class Meta:
        model = Pipeline
        fields = ['name']
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Sales Pipeline', 'autofocus': True}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance.pk:
            self.fields['stages_text'].initial = '\n'.join(self.instance.stages or [])

    def clean_stages_text(self):
        text = self.cleaned_data.get('stages_text') or ''
        stages = [line.strip() for line in text.splitlines() if line.strip()]
        if not stages:
            raise ValidationError('Add at least one stage')

        seen = set()
        for stage in stages:
            if stage in seen:
                raise ValidationError(f'Stage "{stage}" is listed twice')
            seen.add(stage)
        return stages

    def save(self, commit=True):
        pipeline = super().save(commit=False)
        pipeline.stages = self.cleaned_data['stages_text']
        if commit:
            pipeline.save()
        return pipeline


class OpportunityForm(forms.Form):
    """Add a contact to a pipeline (the "add" modal of a kanban column)."""

    contact = forms.ModelChoiceField(queryset=None, widget=forms.Select(attrs={'class': 'form-select'}))
    pipeline = forms.ModelChoiceField(queryset=Pipeline.objects.none(), empty_label=None, widget=forms.Select(attrs={'class': 'form-select'}))
    stage = forms.CharField(required=False, help_text='Defaults to the first stage', widget=forms.TextInput(attrs={'class': 'form-control'}))
    opportunity_value = forms.DecimalField(required=False, max_digits=12, decimal_places=2, label='Value',
                                           widget=forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01'}))
    next_follow_up_date = forms.DateField(required=False, label='Next Follow-up',
                                          widget=forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}))
    owner = forms.ModelChoiceField(queryset=User.objects.none(), required=False, empty_label='Unassigned',
                                   widget=forms.Select(attrs={'class': 'form-select'}))

    def __init__(self, *args, **kwargs):
        from apps.contacts.models import Contact

        account = kwargs.pop('account', None)
        super().__init__(*args, **kwargs)
        self.fields['contact'].queryset = Contact.objects.filter(account=account).order_by('name')
        self.fields['pipeline'].queryset = Pipeline.objects.filter(account=account)
        self.fields['owner'].queryset = _owner_queryset(account)

    def clean(self):
        cleaned_data = super().clean()
        pipeline = cleaned_data.get('pipeline')
        stage = (cleaned_data.get('stage') or '').strip()
        if pipeline is not None and stage and not pipeline.has_stage(stage):
            raise ValidationError({'stage': f'"{stage}" is not a stage of {pipeline.name}'})
        cleaned_data['stage'] = stage or None
        return cleaned_data


class BulkAssignForm(forms.Form):
    """Move the selected contacts into one pipeline stage (replacing their opportunities)."""

    contact_ids = forms.CharField(widget=forms.HiddenInput(), required=True)
    pipeline = forms.ModelChoiceField(queryset=Pipeline.objects.none(), empty_label=None, label='Pipeline',
                                      widget=forms.Select(attrs={'class': 'form-select'}))
    stage = forms.CharField(required=False, label='Stage', help_text='Defaults to the first stage',
                            widget=forms.TextInput(attrs={'class': 'form-control'}))
    owner = forms.ModelChoiceField(queryset=User.objects.none(), required=False, label='Owner', empty_label='Keep unassigned',
                                   widget=forms.Select(attrs={'class': 'form-select'}))

    def __init__(self, *args, **kwargs):
        account = kwargs.pop('account', None)
        super().__init__(*args, **kwargs)
        if account:
            self.fields['pipeline'].queryset = Pipeline.objects.filter(account=account)
            self.fields['owner'].queryset = _owner_queryset(account)

    def clean_contact_ids(self):
        contact_ids = self.cleaned_data.get('contact_ids', '')
        try:
            id_list = [int(pk.strip()) for pk in contact_ids.split(',') if pk.strip()]
        except ValueError:
            raise ValidationError('Invalid contact IDs')
        if not id_list:
            raise ValidationError('No contacts selected')
        return id_list

    def clean(self):
        cleaned_data = super().clean()
        pipeline = cleaned_data.get('pipeline')
        stage = (cleaned_data.get('stage') or '').strip()
        if pipeline is not None and stage and not pipeline.has_stage(stage):
            raise ValidationError({'stage': f'"{stage}" is not a stage of {pipeline.name}'})
        cleaned_data['stage'] = stage or None
        return cleaned_data
