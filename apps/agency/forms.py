from decimal import Decimal, InvalidOperation

from django import forms

from .models import Client, PropertyListing, ContentAsset, Invoice


class ClientForm(forms.ModelForm):
    class Meta:
        model = Client
        fields = ['name', 'email', 'phone', 'company_name', 'company_type', 'website_url', 'logo_url',
                  'address', 'city', 'state', 'subscription_tier', 'subscription_status', 'monthly_fee',
                  'contract_start_date', 'contract_end_date', 'owner', 'notes']
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control', 'autofocus': True}),
            'email': forms.EmailInput(attrs={'class': 'form-control'}),
            'phone': forms.TextInput(attrs={'class': 'form-control'}),
            'company_name': forms.TextInput(attrs={'class': 'form-control'}),
            'company_type': forms.Select(attrs={'class': 'form-select'}),
            'website_url': forms.URLInput(attrs={'class': 'form-control'}),
            'logo_url': forms.URLInput(attrs={'class': 'form-control'}),
            'address': forms.TextInput(attrs={'class': 'form-control'}),
            'city': forms.TextInput(attrs={'class': 'form-control'}),
            'state': forms.TextInput(attrs={'class': 'form-control'}),
            'subscription_tier': forms.Select(attrs={'class': 'form-select'}),
            'subscription_status': forms.Select(attrs={'class': 'form-select'}),
            'monthly_fee': forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01'}),
            'contract_start_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}, format='%Y-%m-%d'),
            'contract_end_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}, format='%Y-%m-%d'),
            'owner': forms.Select(attrs={'class': 'form-select'}),
            'notes': forms.Textarea(attrs={'class': 'form-control', 'rows': 4}),
        }

    def clean(self):
        cleaned_data = super().clean()
        start = cleaned_data.get('contract_start_date')
        end = cleaned_data.get('contract_end_date')
        if start and end and end < start:
            self.add_error('contract_end_date', 'Contract end date must be after the start date')
        return cleaned_data


class PropertyListingForm(forms.ModelForm):
    class Meta:
        model = PropertyListing
        fields = ['client', 'mls_number', 'address', 'city', 'state', 'zip_code', 'property_type',
                  'listing_status', 'price', 'bedrooms', 'bathrooms', 'square_feet', 'description',
                  'featured_image_url', 'virtual_tour_url', 'is_featured', 'listed_date', 'sold_date', 'sold_price']
        widgets = {
            'client': forms.Select(attrs={'class': 'form-select'}),
            'mls_number': forms.TextInput(attrs={'class': 'form-control'}),
            'address': forms.TextInput(attrs={'class': 'form-control'}),
            'city': forms.TextInput(attrs={'class': 'form-control'}),
            'state': forms.TextInput(attrs={'class': 'form-control'}),
            'zip_code': forms.TextInput(attrs={'class': 'form-control'}),
            'property_type': forms.Select(attrs={'class': 'form-select'}),
            'listing_status': forms.Select(attrs={'class': 'form-select'}),
            'price': forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01'}),
            'bedrooms': forms.NumberInput(attrs={'class': 'form-control'}),
            'bathrooms': forms.NumberInput(attrs={'class': 'form-control', 'step': '0.5'}),
            'square_feet': forms.NumberInput(attrs={'class': 'form-control'}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 4}),
            'featured_image_url': forms.URLInput(attrs={'class': 'form-control'}),
            'virtual_tour_url': forms.URLInput(attrs={'class': 'form-control'}),
            'is_featured': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
            'listed_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}, format='%Y-%m-%d'),
            'sold_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}, format='%Y-%m-%d'),
            'sold_price': forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01'}),
        }

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('listing_status') != 'sold' and (cleaned_data.get('sold_date') or cleaned_data.get('sold_price')):
            self.add_error('listing_status', 'Set the status to Sold to record a sale')
        return cleaned_data


class PropertyFilterForm(forms.Form):
    listing_status = forms.ChoiceField(choices=[('', 'All Statuses')] + PropertyListing.LISTING_STATUS_CHOICES, required=False,
                                       widget=forms.Select(attrs={'class': 'form-select'}))
    property_type = forms.ChoiceField(choices=[('', 'All Types')] + PropertyListing.PROPERTY_TYPE_CHOICES, required=False,
                                      widget=forms.Select(attrs={'class': 'form-select'}))
    client = forms.ModelChoiceField(queryset=Client.objects.all(), required=False, empty_label='All Clients',
                                    widget=forms.Select(attrs={'class': 'form-select'}))


class ContentAssetForm(forms.ModelForm):
    tags_text = forms.CharField(required=False, label='Tags', help_text='Comma-separated keywords',
                                widget=forms.TextInput(attrs={'class': 'form-control'}))

    class Meta:
        model = ContentAsset
        fields = ['name', 'asset_type', 'category', 'file_url', 'thumbnail_url', 'description', 'client', 'is_global']
        widgets = {
            'name': forms.TextInput(attrs={'class': 'form-control'}),
            'asset_type': forms.Select(attrs={'class': 'form-select'}),
            'category': forms.TextInput(attrs={'class': 'form-control'}),
            'file_url': forms.URLInput(attrs={'class': 'form-control'}),
            'thumbnail_url': forms.URLInput(attrs={'class': 'form-control'}),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
            'client': forms.Select(attrs={'class': 'form-select'}),
            'is_global': forms.CheckboxInput(attrs={'class': 'form-check-input'}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['client'].empty_label = 'No client'
        if self.instance.pk:
            self.fields['tags_text'].initial = ', '.join(self.instance.tags or [])

    def clean_tags_text(self):
        text = self.cleaned_data.get('tags_text') or ''
        return [tag.strip() for tag in text.split(',') if tag.strip()]

    def save(self, commit=True):
        asset = super().save(commit=False)
        asset.tags = self.cleaned_data['tags_text']
        if commit:
            asset.save()
        return asset


class ContentFilterForm(forms.Form):
    asset_type = forms.ChoiceField(choices=[('', 'All Types')] + ContentAsset.ASSET_TYPE_CHOICES, required=False,
                                   widget=forms.Select(attrs={'class': 'form-select'}))
    client = forms.ModelChoiceField(queryset=Client.objects.all(), required=False, empty_label='All Clients',
                                    widget=forms.Select(attrs={'class': 'form-select'}))


class InvoiceForm(forms.ModelForm):
    line_items_text = forms.CharField(
        required=False,
        label='Line items',
        help_text='One per line: description | amount. When given, the amount is their total.',
        widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 4, 'placeholder': 'Website build | 1500'}),
    )

    class Meta:
        model = Invoice
        fields = ['client', 'amount', 'due_date', 'description']
        widgets = {
            'client': forms.Select(attrs={'class': 'form-select'}),
            'amount': forms.NumberInput(attrs={'class': 'form-control', 'step': '0.01'}),
            'due_date': forms.DateInput(attrs={'class': 'form-control', 'type': 'date'}, format='%Y-%m-%d'),
            'description': forms.Textarea(attrs={'class': 'form-control', 'rows': 3}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['amount'].required = False
        if self.instance.pk and self.instance.line_items:
            self.fields['line_items_text'].initial = '\n'.join(
                f"{item['description']} | {item['amount']}" for item in self.instance.line_items
            )

    def clean_line_items_text(self):
        items = []
        text = self.cleaned_data.get('line_items_text') or ''
        for number, line in enumerate(text.splitlines(), start=1):
            if not line.strip():
                continue
            description, sep, amount = line.rpartition('|')
            if not sep or not description.strip():
                raise forms.ValidationError(f'Line {number}: use "description | amount"')
            try:
                value = Decimal(amount.strip())
            except InvalidOperation:
                raise forms.ValidationError(f'Line {number}: "{amount.strip()}" is not an amount')
            items.append({'description': description.strip(), 'amount': str(value.quantize(Decimal('0.01')))})
        return items

    def clean(self):
        cleaned_data = super().clean()
        items = cleaned_data.get('line_items_text')
        if items:
            cleaned_data['amount'] = sum(Decimal(item['amount']) for item in items)
        elif cleaned_data.get('amount') is None and 'amount' not in self.errors:
            self.add_error('amount', 'Enter an amount or at least one line item')
        return cleaned_data

    def save(self, commit=True):
        invoice = super().save(commit=False)
        invoice.line_items = self.cleaned_data['line_items_text']
        invoice.amount = self.cleaned_data['amount']
        if commit:
            invoice.save()
        return invoice


class InvoiceFilterForm(forms.Form):
    search = forms.CharField(required=False, widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Invoice number or description'}))
    status = forms.ChoiceField(choices=[('', 'All Statuses')] + Invoice.STATUS_CHOICES, required=False,
                               widget=forms.Select(attrs={'class': 'form-select'}))
    client = forms.ModelChoiceField(queryset=Client.objects.all(), required=False, empty_label='All Clients',
                                    widget=forms.Select(attrs={'class': 'form-select'}))
