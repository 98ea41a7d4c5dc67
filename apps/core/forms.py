from django import forms
from django.core.exceptions import ValidationError

from .models import Account, Tag, EmailTemplate


class AccountForm(forms.ModelForm):
    # One stage per line, used to seed the sub-account's first pipeline
    stages_text = forms.CharField(
        required=False,
        label='Pipeline Stages',
        help_text='One stage per line. Leave empty for the default stages.',
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 8}),
    )

    class Meta:
        model = Account
        fields = ['name', 'company_name', 'industry', 'primary_color', 'secondary_color', 'logo']
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'autofocus': True}),
            'company_name': forms.TextInput(attrs={'class': 'form-control'}),
            'industry': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. Real Estate'}),
            'primary_color': forms.TextInput(attrs={'class': 'form-control', 'type': 'color'}),
            'secondary_color': forms.TextInput(attrs={'class': 'form-control', 'type': 'color'}),
            'logo': forms.FileInput(attrs={'class': 'form-control'}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance.pk and self.instance.pipeline_stages:
            self.fields['stages_text'].initial = '\n'.join(self.instance.pipeline_stages)

    def clean_stages_text(self):
        text = self.cleaned_data.get('stages_text') or ''
        return [line.strip() for line in text.splitlines() if line.strip()]

    def save(self, commit=True):
        account = super().save(commit=False)
        if self.cleaned_data.get('stages_text'):
            account.pipeline_stages = self.cleaned_data['stages_text']
        if commit:
            account.save()
        return account


class TagForm(forms.ModelForm):
    class Meta:
        model = Tag
        fields = ['name', 'color']
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'e.g. VIP'}),
            'color': forms.TextInput(attrs={'class': 'form-control form-control-color', 'type': 'color'}),
        }

    def clean_name(self):
        name = self.cleaned_data.get('name', '').strip()
        if Tag.objects.filter(name__iexact=name).exclude(pk=self.instance.pk).exists():
            raise ValidationError('A tag with this name already exists')
        return name


class EmailTemplateForm(forms.ModelForm):
    class Meta:
        model = EmailTemplate
        fields = ['name', 'subject', 'content']
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control'}),
            'subject': forms.TextInput(attrs={'class': 'form-control'}),
            'content': forms.Textarea(attrs={'class': 'form-control', 'rows': 10}),
        }
