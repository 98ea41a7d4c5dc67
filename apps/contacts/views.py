import logging
from io import BytesIO, StringIO

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.paginator import Paginator
from django.http import HttpResponse, JsonResponse
from django.shortcuts import render, redirect, get_object_or_404
from django.views.decorators.http import require_POST

from apps.accounts.decorators import account_required, admin_required
from apps.appointments.forms import AppointmentForm
from apps.pipelines.forms import BulkAssignForm, OpportunityForm
from apps.pipelines.models import Pipeline
from . import csv_io
from .forms import ContactForm, ContactFilterForm, ActivityForm, ContactImportForm, ColumnMappingForm
from .models import Contact
from .services import log_activity

logger = logging.getLogger(__name__)

IMPORT_SESSION_KEY = 'contact_import_csv'


def _is_ajax(request):
    return request.headers.get('X-Requested-With') == 'XMLHttpRequest'


def _filtered_contacts(request):
    contacts = Contact.objects.filter(account=request.account) \
        .select_related('owner') \
        .prefetch_related('tags') \
        .order_by('-created_at')

    filter_form = ContactFilterForm(request.GET, account=request.account)
    if filter_form.is_valid():
        contacts = filter_form.filter(contacts)
    return contacts, filter_form


@login_required
@account_required
def contact_list_view(request):
    contacts, filter_form = _filtered_contacts(request)

    total_count = contacts.count()
    score_counts = {
        value: contacts.filter(lead_score=value).count()
        for value, _label in Contact.LEAD_SCORE_CHOICES
    }

    paginator = Paginator(contacts, getattr(settings, 'PAGINATION_SIZE', 25))
    page_obj = paginator.get_page(request.GET.get('page', 1))

    context = {
        'contacts': page_obj,
        'page_obj': page_obj,
        'filter_form': filter_form,
        'total_count': total_count,
        'score_counts': score_counts,
        'is_paginated': page_obj.has_other_pages(),
        'page_range': paginator.get_elided_page_range(page_obj.number, on_each_side=2, on_ends=1),
        'bulk_form': BulkAssignForm(account=request.account),
        'active_page': 'contacts',
    }

    return render(request, 'contacts/contact_list.html', context)


@login_required
@account_required
def contact_detail_view(request, pk):
    contact = get_object_or_404(
        Contact.objects.select_related('owner', 'account'),
        pk=pk,
        account=request.account,
    )

    activities = contact.activities.select_related('logged_by', 'opportunity')
    appointments = contact.appointments.select_related('assigned_to').order_by('-datetime')
    opportunities = contact.opportunities.select_related('pipeline', 'owner')

    # Activities and appointments in one newest-first timeline
    timeline = [
        {'kind': 'activity', 'at': activity.logged_at, 'item': activity}
        for activity in activities
    ] + [
        {'kind': 'appointment', 'at': appointment.datetime, 'item': appointment}
        for appointment in appointments
    ]
    timeline.sort(key=lambda entry: entry['at'], reverse=True)

    context = {
        'contact': contact,
        'timeline': timeline,
        'activities': activities,
        'appointments': appointments,
        'opportunities': opportunities,
        'score': contact.score_breakdown(),
        'activity_form': ActivityForm(contact=contact),
        'appointment_form': AppointmentForm(account=request.account, initial={'contact': contact}),
        'opportunity_form': OpportunityForm(account=request.account),
        'pipelines': Pipeline.objects.filter(account=request.account),
        'active_page': 'contacts',
    }

    return render(request, 'contacts/contact_detail.html', context)


@login_required
@account_required
def contact_create_view(request):
    if request.method == 'POST':
        form = ContactForm(request.POST, account=request.account)

        if form.is_valid():
            contact = form.save(commit=False)
            contact.account = request.account
            if contact.owner is None:
                contact.owner = request.user
            contact.save()
            form.save_m2m()

            logger.info("Contact %s created by %s", contact.pk, request.user.email)
            messages.success(request, f'Contact "{contact.name}" created successfully')
            return redirect('contacts:contact_detail', pk=contact.pk)

        messages.error(request, 'Please correct the errors below')
    else:
        form = ContactForm(account=request.account)

    context = {
        'form': form,
        'form_title': 'New Contact',
        'submit_text': 'Create Contact',
        'cancel_url': 'contacts:contact_list',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@account_required
def contact_edit_view(request, pk):
    contact = get_object_or_404(Contact, pk=pk, account=request.account)

    if request.method == 'POST':
        form = ContactForm(request.POST, instance=contact, account=request.account)

        if form.is_valid():
            form.save()
            messages.success(request, 'Contact updated successfully')
            return redirect('contacts:contact_detail', pk=contact.pk)

        messages.error(request, 'Please correct the errors below')
    else:
        form = ContactForm(instance=contact, account=request.account)

    context = {
        'form': form,
        'contact': contact,
        'form_title': f'Edit: {contact.name}',
        'submit_text': 'Save Changes',
        'cancel_url': 'contacts:contact_list',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@account_required
@require_POST
def contact_delete_view(request, pk):
    contact = get_object_or_404(Contact, pk=pk, account=request.account)
    name = contact.name
    contact.delete()

    logger.info("Contact %s deleted by %s", pk, request.user.email)
    if _is_ajax(request):
        return JsonResponse({'success': True})

    messages.success(request, f'Contact "{name}" deleted')
    return redirect('contacts:contact_list')


@login_required
@account_required
@require_POST
def contact_tags_view(request, pk):
    """Replace a contact's tags with the comma-separated ``tags`` value."""
    contact = get_object_or_404(Contact, pk=pk, account=request.account)
    names = [name.strip() for name in request.POST.get('tags', '').split(',') if name.strip()]
    contact.tags.set(names)

    if _is_ajax(request):
        return JsonResponse({'success': True, 'tags': sorted(contact.tags.names())})

    messages.success(request, 'Tags updated')
    return redirect('contacts:contact_detail', pk=contact.pk)


@login_required
@account_required
@require_POST
def contact_log_activity_view(request, pk):
    """Quick-log an outreach attempt (form post or AJAX)."""
    contact = get_object_or_404(Contact, pk=pk, account=request.account)
    form = ActivityForm(request.POST, contact=contact)

    if not form.is_valid():
        if _is_ajax(request):
            return JsonResponse({'success': False, 'errors': form.errors}, status=400)
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
        return redirect('contacts:contact_detail', pk=contact.pk)

    data = form.cleaned_data
    result = log_activity(
        contact,
        outcome=data['outcome'],
        channel=data['channel'],
        logged_by=request.user,
        notes=data.get('notes', ''),
        next_action=data.get('next_action', ''),
        opportunity=data.get('opportunity'),
        next_follow_up=data.get('next_follow_up'),
    )

    if _is_ajax(request):
        if not result.ok:
            return JsonResponse({'success': False, 'error': result.error}, status=400)
        return JsonResponse({
            'success': True,
            'activity_id': result.value.pk,
            'last_contacted_at': contact.last_contacted_at.isoformat(),
            'score': contact.score_breakdown().total,
        })

    if result.ok:
        messages.success(request, f'{result.value.outcome} logged')
    else:
        messages.error(request, result.error)
    return redirect('contacts:contact_detail', pk=contact.pk)



# EXPORT / IMPORT
@login_required
@account_required
def contact_export_view(request):
    """Export the filtered contact list as CSV (default) or Excel."""
    export_format = request.GET.get('format', 'csv')
    contacts, _filter_form = _filtered_contacts(request)

    if export_format == 'excel':
        buffer = BytesIO()
        csv_io.write_excel(contacts, buffer)
        response = HttpResponse(
            buffer.getvalue(),
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        response['Content-Disposition'] = f'attachment; filename="{csv_io.export_filename("xlsx")}"'
        return response

    buffer = StringIO()
    csv_io.write_csv(contacts, buffer)
    response = HttpResponse(buffer.getvalue(), content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{csv_io.export_filename("csv")}"'
    return response


@login_required
@account_required
def contact_import_view(request):
    """Step 1: upload the CSV. Its text is kept in the session for the mapping step."""
    if request.method == 'POST':
        form = ContactImportForm(request.POST, request.FILES)

        if form.is_valid():
            raw = form.cleaned_data['file'].read()
            try:
                text = raw.decode('utf-8-sig')
            except UnicodeDecodeError:
                messages.error(request, 'The file must be UTF-8 encoded')
                return redirect('contacts:contact_import')

            rows = csv_io.parse_csv(text)
            if len(rows) < 2:
                messages.error(request, 'The file needs a header row and at least one contact')
                return redirect('contacts:contact_import')

            request.session[IMPORT_SESSION_KEY] = text
            return redirect('contacts:contact_import_map')

        messages.error(request, 'Please correct the errors in the form')
    else:
        form = ContactImportForm()

    context = {
        'form': form,
        'active_page': 'contacts',
    }
    return render(request, 'contacts/contact_import.html', context)


@login_required
@account_required
def contact_import_map_view(request):
    """Step 2: confirm the column mapping, then insert the contacts."""
    text = request.session.get(IMPORT_SESSION_KEY)
    if not text:
        messages.error(request, 'Upload a CSV file first')
        return redirect('contacts:contact_import')

    rows = csv_io.parse_csv(text)
    headers = rows[0]

    if request.method == 'POST':
        form = ColumnMappingForm(request.POST, headers=headers, account=request.account)

        if form.is_valid():
            try:
                created = csv_io.import_contacts(
                    text,
                    form.get_mapping(),
                    account=request.account,
                    owner=form.cleaned_data.get('owner'),
                )
            except csv_io.CSVImportError as exc:
                messages.error(request, str(exc))
            else:
                request.session.pop(IMPORT_SESSION_KEY, None)
                messages.success(request, f'Imported {len(created)} contact(s)')
                return redirect('contacts:contact_list')
    else:
        form = ColumnMappingForm(
            headers=headers,
            initial_mapping=csv_io.auto_map_columns(headers),
            account=request.account,
        )

    context = {
        'form': form,
        'headers': headers,
        'preview_rows': rows[1:6],
        'row_count': len(rows) - 1,
        'active_page': 'contacts',
    }
    return render(request, 'contacts/contact_import_map.html', context)


@login_required
@admin_required
@account_required
@require_POST
def contact_bulk_delete_view(request):
    ids = [int(value) for value in request.POST.getlist('contact_ids') if value.isdigit()]
    if not ids:
        messages.error(request, 'No contacts selected')
        return redirect('contacts:contact_list')

    contacts = Contact.objects.filter(account=request.account, pk__in=ids)
    count = contacts.count()
    contacts.delete()

    logger.info("Bulk delete of %s contacts by %s", count, request.user.email)
    messages.success(request, f'{count} contact(s) deleted')
    return redirect('contacts:contact_list')
