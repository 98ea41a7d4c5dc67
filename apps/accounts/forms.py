from django import forms
from django.contrib.auth.forms import UserCreationForm
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _
from django.core.exceptions import ValidationError
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Fieldset, Div, Field

from .models import UserProfile

User = get_user_model()


def _row(*fields):
    return Div(*(Div(name, css_class='col-md-6') for name in fields), css_class='row')


class LoginForm(forms.Form):
    email = forms.EmailField(
        label=_('Email'),
        max_length=255,
        widget=forms.EmailInput(attrs={'class': 'form-control', 'placeholder': _('you@agency.com'), 'autofocus': True}),
    )
    password = forms.CharField(
        label=_('Password'),
        widget=forms.PasswordInput(attrs={'class': 'form-control'}),
    )
    remember = forms.BooleanField(
        label=_('Keep me signed in'),
        required=False,
        widget=forms.CheckboxInput(attrs={'class': 'form-check-input'}),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.helper = FormHelper()
        self.helper.form_tag = False
        self.helper.layout = Layout(
            Field('email', css_class='mb-3'),
            Field('password', css_class='mb-3'),
            'remember',
        )

    def clean_email(self):
        return self.cleaned_data.get('email', '').lower().strip()


class UserCreateForm(UserCreationForm):
    """An admin adds an owner (agent or admin) to the active sub-account."""

    email = forms.EmailField(label=_('Email'), widget=forms.EmailInput(attrs={'class': 'form-control'}))
    first_name = forms.CharField(label=_('First name'), max_length=50, widget=forms.TextInput(attrs={'class': 'form-control'}))
    last_name = forms.CharField(label=_('Last name'), max_length=50, widget=forms.TextInput(attrs={'class': 'form-control'}))
    role = forms.ChoiceField(label=_('Role'), choices=User.ROLE_CHOICES, initial='agent',
                             widget=forms.Select(attrs={'class': 'form-select'}))

    class Meta:
        model = User
        fields = ['email', 'first_name', 'last_name', 'role']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name in ('password1', 'password2'):
            self.fields[name].widget.attrs['class'] = 'form-control'

        self.helper = FormHelper()
        self.helper.form_tag = False
        self.helper.layout = Layout(
            Fieldset(_('Owner'), _row('first_name', 'last_name'), 'email', 'role'),
            Fieldset(_('Password'), _row('password1', 'password2')),
        )

    def clean_email(self):
        email = self.cleaned_data.get('email', '').lower().strip()
        if User.objects.filter(email=email).exists():
            raise ValidationError(_('A user with this email already exists.'))
        return email


class UserNameForm(forms.ModelForm):

    class Meta:
        model = User
        fields = ['first_name', 'last_name']
        widgets = {
            'first_name': forms.TextInput(attrs={'class': 'form-control'}),
            'last_name': forms.TextInput(attrs={'class': 'form-control'}),
        }


class UserSettingsForm(forms.ModelForm):

    class Meta:
        model = UserProfile
        fields = [
            'follow_up_reminder_enabled',
            'follow_up_reminder_time',
            'email_notifications',
            'theme',
            'default_pipeline',
        ]

        widgets = {
            'follow_up_reminder_enabled': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
            'follow_up_reminder_time': forms.TimeInput(attrs={'class': 'form-control', 'type': 'time'}, format='%H:%M'),
            'email_notifications': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
            'theme': forms.Select(attrs={'class': 'form-select'}),
            'default_pipeline': forms.Select(attrs={'class': 'form-select'}),
        }

    def __init__(self, *args, **kwargs):
        # Only pipelines of the active sub-account are offered
        account = kwargs.pop('account', None)
        super().__init__(*args, **kwargs)

        from apps.pipelines.models import Pipeline
        pipelines = Pipeline.objects.none()
        if account is not None:
            pipelines = Pipeline.objects.filter(account=account)
        self.fields['default_pipeline'].queryset = pipelines
        self.fields['default_pipeline'].required = False

        self.helper = FormHelper()
        self.helper.form_tag = False
        self.helper.layout = Layout(
            Fieldset(_('Reminders'), _row('follow_up_reminder_enabled', 'follow_up_reminder_time'), 'email_notifications'),
            Fieldset(_('Preferences'), _row('theme', 'default_pipeline')),
        )
