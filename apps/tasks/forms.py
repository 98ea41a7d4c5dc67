from django import forms

from apps.accounts.models import User
from .models import DailyTask


class DailyTaskForm(forms.ModelForm):
    class Meta:
        model = DailyTask
        fields = ['title', 'due_date', 'scheduled_time', 'priority', 'owner', 'is_company_wide']
        widgets = {
            'title': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'What needs to be done?', 'autofocus': True}),
            'due_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}, format='%Y-%m-%d'),
            'scheduled_time': forms.TimeInput(attrs={'class': 'form-control', 'type': 'time'}, format='%H:%M'),
            'priority': forms.Select(attrs={'class': 'form-select'}),
            'owner': forms.Select(attrs={'class': 'form-select'}),
            'is_company_wide': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
        }
        labels = {
            'owner': 'Assigned To',
            'is_company_wide': 'Company-wide task',
        }

    def __init__(self, *args, **kwargs):
        account = kwargs.pop('account', None)
        super().__init__(*args, **kwargs)
        self.fields['owner'].queryset = User.objects.filter(account=account, is_active=True)
        self.fields['owner'].empty_label = 'Me'


class TaskFilterForm(forms.Form):
    owner = forms.ModelChoiceField(queryset=User.objects.none(), required=False, empty_label='Everyone',
                                   widget=forms.Select(attrs={'class': 'form-select'}))
    show_completed = forms.BooleanField(required=False, widget=forms.CheckboxInput(attrs={'class': 'form-check-input'}))

    def __init__(self, *args, **kwargs):
        account = kwargs.pop('account', None)
        super().__init__(*args, **kwargs)
        self.fields['owner'].queryset = User.objects.filter(account=account, is_active=True)
