import json

from django import forms
from django.core.exceptions import ValidationError

from .models import Automation


class AutomationForm(forms.ModelForm):
    """Actions and trigger config are edited as JSON text."""

    trigger_config_json = forms.CharField(
        required=False,
        label='Trigger Config',
        help_text='JSON object, e.g. {"stage": "Demo"}',
        widget=forms.Textarea(attrs={'class': 'form-control font-monospace', 'rows': 3}),
    )
    actions_json = forms.CharField(
        required=False,
        label='Actions',
        help_text='JSON list, e.g. [{"type": "send_email", "config": {"template_id": 1}}]',
        widget=forms.Textarea(attrs={'class': 'form-control font-monospace', 'rows': 8}),
    )

    class Meta:
        model = Automation
        fields = ['name', 'description', 'trigger_type', 'status']
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'autofocus': True}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 2}),
            'trigger_type': forms.Select(attrs={'class': 'form-select'}),
            'status': forms.Select(attrs={'class': 'form-select'}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance.pk:
            self.fields['trigger_config_json'].initial = json.dumps(self.instance.trigger_config or {}, indent=2)
            self.fields['actions_json'].initial = json.dumps(self.instance.actions or [], indent=2)

    def clean_trigger_config_json(self):
        text = (self.cleaned_data.get('trigger_config_json') or '').strip()
        if not text:
            return {}
        try:
            value = json.loads(text)
        except ValueError as exc:
            raise ValidationError(f'Invalid JSON: {exc}')
        if not isinstance(value, dict):
            raise ValidationError('Trigger config must be a JSON object')
        return value

    def clean_actions_json(self):
        text = (self.cleaned_data.get('actions_json') or '').strip()
        if not text:
            return []
        try:
            actions = json.loads(text)
        except ValueError as exc:
            raise ValidationError(f'Invalid JSON: {exc}')
        if not isinstance(actions, list):
            raise ValidationError('Actions must be a JSON list')

        valid_types = {value for value, _label in Automation.ACTION_CHOICES}
        for position, action in enumerate(actions, start=1):
            if not isinstance(action, dict) or 'type' not in action:
                raise ValidationError(f'Action {position} needs a "type"')
            if action['type'] not in valid_types:
                raise ValidationError(f'Action {position}: unknown type "{action["type"]}"')
            if not isinstance(action.get('config', {}), dict):
                raise ValidationError(f'Action {position}: "config" must be an object')
        return actions

    def save(self, commit=True):
        automation = super().save(commit=False)
        automation.trigger_config = self.cleaned_data['trigger_config_json']
        automation.actions = self.cleaned_data['actions_json']
        if commit:
            automation.save()
        return automation
