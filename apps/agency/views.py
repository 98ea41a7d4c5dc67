import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db.models import Count, Q, Sum
from django.shortcuts import render, redirect, get_object_or_404
from django.views.decorators.http import require_POST

from apps.accounts.decorators import admin_required
from .forms import (
    ClientForm, PropertyListingForm, PropertyFilterForm, ContentAssetForm, ContentFilterForm,
    InvoiceForm, InvoiceFilterForm,
)
from .models import Client, PropertyListing, ContentAsset, Invoice

logger = logging.getLogger(__name__)


def _form_page(request, form, title, submit_text, cancel_url):
    context = {
        'form': form,
        'form_title': title,
        'submit_text': submit_text,
        'cancel_url': cancel_url,
    }
    return render(request, 'includes/form_page.html', context)



# CLIENTS
@login_required
def client_list_view(request):
    clients = Client.objects.select_related('owner').annotate(properties_count=Count('properties'))

    search_query = request.GET.get('search', '').strip()
    if search_query:
        clients = clients.filter(
            Q(name__icontains=search_query) |
            Q(company_name__icontains=search_query) |
            Q(email__icontains=search_query)
        )

    status = request.GET.get('status', '')
    if status in dict(Client.SUBSCRIPTION_STATUS_CHOICES):
        clients = clients.filter(subscription_status=status)

    active = Client.objects.filter(subscription_status='active')

    context = {
        'clients': clients,
        'search_query': search_query,
        'selected_status': status,
        'status_choices': Client.SUBSCRIPTION_STATUS_CHOICES,
        'active_count': active.count(),
        'monthly_revenue': active.aggregate(total=Sum('monthly_fee'))['total'] or 0,
        'active_page': 'clients',
    }
    return render(request, 'agency/client_list.html', context)


@login_required
@admin_required
def client_create_view(request):
    if request.method == 'POST':
        form = ClientForm(request.POST)
        if form.is_valid():
            client = form.save()
            logger.info("Client %s created by %s", client.pk, request.user.email)
            messages.success(request, f'Client "{client.name}" created')
            return redirect('agency:client_list')
    else:
        form = ClientForm(initial={'owner': request.user})

    return _form_page(request, form, 'New Client', 'Create Client', 'agency:client_list')


@login_required
@admin_required
def client_edit_view(request, pk):
    client = get_object_or_404(Client, pk=pk)

    if request.method == 'POST':
        form = ClientForm(request.POST, instance=client)
        if form.is_valid():
            form.save()
            messages.success(request, 'Client updated')
            return redirect('agency:client_list')
    else:
        form = ClientForm(instance=client)

    return _form_page(request, form, f'Edit: {client.name}', 'Save', 'agency:client_list')


@login_required
@admin_required
@require_POST
def client_delete_view(request, pk):
    client = get_object_or_404(Client, pk=pk)
    name = client.name
    client.delete()
    logger.info("Client %s deleted by %s", pk, request.user.email)
    messages.success(request, f'Client "{name}" deleted')
    return redirect('agency:client_list')



# PROPERTY LISTINGS
@login_required
def property_list_view(request):
    properties = PropertyListing.objects.select_related('client')

    filter_form = PropertyFilterForm(request.GET)
    if filter_form.is_valid():
        data = filter_form.cleaned_data
        if data.get('listing_status'):
            properties = properties.filter(listing_status=data['listing_status'])
        if data.get('property_type'):
            properties = properties.filter(property_type=data['property_type'])
        if data.get('client'):
            properties = properties.filter(client=data['client'])

    context = {
        'properties': properties,
        'filter_form': filter_form,
        'active_page': 'properties',
    }
    return render(request, 'agency/property_list.html', context)


@login_required
@admin_required
def property_create_view(request):
    if request.method == 'POST':
        form = PropertyListingForm(request.POST)
        if form.is_valid():
            listing = form.save()
            messages.success(request, f'Listing "{listing.address}" created')
            return redirect('agency:property_list')
    else:
        form = PropertyListingForm(initial={'client': request.GET.get('client')})

    return _form_page(request, form, 'New Property Listing', 'Create Listing', 'agency:property_list')


@login_required
@admin_required
def property_edit_view(request, pk):
    listing = get_object_or_404(PropertyListing, pk=pk)

    if request.method == 'POST':
        form = PropertyListingForm(request.POST, instance=listing)
        if form.is_valid():
            form.save()
            messages.success(request, 'Listing updated')
            return redirect('agency:property_list')
    else:
        form = PropertyListingForm(instance=listing)

    return _form_page(request, form, f'Edit: {listing.address}', 'Save', 'agency:property_list')


@login_required
@admin_required
@require_POST
def property_delete_view(request, pk):
    listing = get_object_or_404(PropertyListing, pk=pk)
    listing.delete()
    messages.success(request, 'Listing deleted')
    return redirect('agency:property_list')



# CONTENT LIBRARY
@login_required
def content_list_view(request):
    assets = ContentAsset.objects.select_related('client')

    filter_form = ContentFilterForm(request.GET)
    if filter_form.is_valid():
        data = filter_form.cleaned_data
        if data.get('asset_type'):
            assets = assets.filter(asset_type=data['asset_type'])
        if data.get('client'):
            # Global assets are available to every client
            assets = assets.filter(Q(client=data['client']) | Q(is_global=True))

    context = {
        'assets': assets,
        'filter_form': filter_form,
        'active_page': 'content',
    }
    return render(request, 'agency/content_list.html', context)


@login_required
@admin_required
def content_create_view(request):
    if request.method == 'POST':
        form = ContentAssetForm(request.POST)
        if form.is_valid():
            asset = form.save()
            messages.success(request, f'Asset "{asset.name}" added')
            return redirect('agency:content_list')
    else:
        form = ContentAssetForm()

    return _form_page(request, form, 'New Content Asset', 'Add Asset', 'agency:content_list')


@login_required
@admin_required
def content_edit_view(request, pk):
    asset = get_object_or_404(ContentAsset, pk=pk)

    if request.method == 'POST':
        form = ContentAssetForm(request.POST, instance=asset)
        if form.is_valid():
            form.save()
            messages.success(request, 'Asset updated')
            return redirect('agency:content_list')
    else:
        form = ContentAssetForm(instance=asset)

    return _form_page(request, form, f'Edit: {asset.name}', 'Save', 'agency:content_list')


@login_required
@admin_required
@require_POST
def content_delete_view(request, pk):
    asset = get_object_or_404(ContentAsset, pk=pk)
    asset.delete()
    messages.success(request, 'Asset deleted')
    return redirect('agency:content_list')



# INVOICES
@login_required
def invoice_list_view(request):
    invoices = Invoice.objects.select_related('client')

    filter_form = InvoiceFilterForm(request.GET)
    if filter_form.is_valid():
        data = filter_form.cleaned_data
        if data.get('search'):
            invoices = invoices.filter(
                Q(invoice_number__icontains=data['search']) |
                Q(description__icontains=data['search'])
            )
        if data.get('status'):
            invoices = invoices.filter(status=data['status'])
        if data.get('client'):
            invoices = invoices.filter(client=data['client'])

    totals = Invoice.objects.aggregate(
        outstanding=Sum('amount', filter=Q(status__in=Invoice.OUTSTANDING_STATUSES)),
        paid=Sum('amount', filter=Q(status=Invoice.STATUS_PAID)),
        overdue=Count('id', filter=Q(status=Invoice.STATUS_OVERDUE)),
    )

    context = {
        'invoices': invoices,
        'filter_form': filter_form,
        'total_outstanding': totals['outstanding'] or 0,
        'total_paid': totals['paid'] or 0,
        'overdue_count': totals['overdue'],
        'active_page': 'invoices',
    }
    return render(request, 'agency/invoice_list.html', context)


@login_required
def invoice_detail_view(request, pk):
    invoice = get_object_or_404(Invoice.objects.select_related('client'), pk=pk)

    context = {
        'invoice': invoice,
        'next_statuses': [
            (value, label) for value, label in Invoice.STATUS_CHOICES if invoice.can_transition_to(value)
        ],
        'active_page': 'invoices',
    }
    return render(request, 'agency/invoice_detail.html', context)


@login_required
@admin_required
def invoice_create_view(request):
    if request.method == 'POST':
        form = InvoiceForm(request.POST)
        if form.is_valid():
            invoice = form.save()
            logger.info("Invoice %s created for client %s by %s", invoice.invoice_number, invoice.client_id,
                        request.user.email)
            messages.success(request, f'Invoice {invoice.invoice_number} created')
            return redirect('agency:invoice_detail', pk=invoice.pk)
    else:
        form = InvoiceForm(initial={'client': request.GET.get('client')})

    return _form_page(request, form, 'New Invoice', 'Create Invoice', 'agency:invoice_list')


@login_required
@admin_required
def invoice_edit_view(request, pk):
    invoice = get_object_or_404(Invoice, pk=pk)

    if request.method == 'POST':
        form = InvoiceForm(request.POST, instance=invoice)
        if form.is_valid():
            form.save()
            messages.success(request, 'Invoice updated')
            return redirect('agency:invoice_detail', pk=invoice.pk)
    else:
        form = InvoiceForm(instance=invoice)

    return _form_page(request, form, f'Edit: {invoice.invoice_number}', 'Save', 'agency:invoice_list')


@login_required
@admin_required
@require_POST
def invoice_status_view(request, pk):
    """Mark as sent / paid / cancelled through the model's transition guard."""
    invoice = get_object_or_404(Invoice, pk=pk)
    status = request.POST.get('status', '')

    try:
        invoice.transition_to(status)
    except ValueError as exc:
        messages.error(request, str(exc))
    else:
        logger.info("Invoice %s marked %s by %s", invoice.invoice_number, status, request.user.email)
        messages.success(request, f'Invoice {invoice.invoice_number} marked {invoice.get_status_display()}')

    return redirect('agency:invoice_detail', pk=invoice.pk)


@login_required
@admin_required
@require_POST
def invoice_delete_view(request, pk):
    invoice = get_object_or_404(Invoice, pk=pk)
    number = invoice.invoice_number
    invoice.delete()
    logger.info("Invoice %s deleted by %s", number, request.user.email)
    messages.success(request, f'Invoice {number} deleted')
    return redirect('agency:invoice_list')
