import calendar
import logging
from datetime import date, datetime, time, timedelta

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.shortcuts import render, redirect, get_object_or_404
from django.utils import timezone
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from apps.accounts.decorators import account_required
from .forms import AppointmentForm, AppointmentEditForm
from .models import Appointment
from .services import schedule_appointment, change_status

logger = logging.getLogger(__name__)


def _is_ajax(request):
    return request.headers.get('X-Requested-With') == 'XMLHttpRequest'


def _next_url(request, default):
    next_url = request.POST.get('next') or request.GET.get('next')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return next_url
    return default


def _month_from_request(request):
    today = timezone.localdate()
    try:
        year = int(request.GET.get('year', today.year))
        month = int(request.GET.get('month', today.month))
        return date(year, month, 1)
    except ValueError:
        return today.replace(day=1)


@login_required
@account_required
def calendar_view(request):
    """Month grid (weeks start on Sunday) of the sub-account's appointments."""
    first_day = _month_from_request(request)
    weeks = calendar.Calendar(firstweekday=6).monthdatescalendar(first_day.year, first_day.month)

    tz = timezone.get_current_timezone()
    grid_start = timezone.make_aware(datetime.combine(weeks[0][0], time.min), tz)
    grid_end = timezone.make_aware(datetime.combine(weeks[-1][-1] + timedelta(days=1), time.min), tz)

    appointments = Appointment.objects.filter(
        contact__account=request.account,
        datetime__gte=grid_start,
        datetime__lt=grid_end,
    ).select_related('contact', 'assigned_to')

    status = request.GET.get('status', '')
    if status in dict(Appointment.STATUS_CHOICES):
        appointments = appointments.filter(status=status)

    by_day = {}
    for appointment in appointments:
        by_day.setdefault(timezone.localtime(appointment.datetime).date(), []).append(appointment)

    today = timezone.localdate()
    calendar_weeks = [
        [
            {
                'date': day,
                'in_month': day.month == first_day.month,
                'is_today': day == today,
                'appointments': by_day.get(day, []),
            }
            for day in week
        ]
        for week in weeks
    ]

    previous_month = (first_day - timedelta(days=1)).replace(day=1)
    next_month = (first_day + timedelta(days=32)).replace(day=1)

    upcoming = Appointment.objects.filter(
        contact__account=request.account,
        status=Appointment.STATUS_SCHEDULED,
        datetime__gte=timezone.now(),
    ).select_related('contact')[:10]

    context = {
        'month': first_day,
        'weeks': calendar_weeks,
        'weekday_names': ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat'],
        'previous_month': previous_month,
        'next_month': next_month,
        'selected_status': status,
        'status_choices': Appointment.STATUS_CHOICES,
        'upcoming': upcoming,
        'active_page': 'calendar',
    }
    return render(request, 'appointments/calendar.html', context)


@login_required
@account_required
def appointment_create_view(request):
    if request.method == 'POST':
        form = AppointmentForm(request.POST, account=request.account)
        if form.is_valid():
            data = form.cleaned_data
            result = schedule_appointment(
                data['contact'],
                title=data['title'],
                datetime=data['datetime'],
                assigned_to=data.get('assigned_to') or request.user,
                location=data.get('location', ''),
                opportunity=data.get('opportunity'),
                notes=data.get('notes', ''),
            )
            if result.ok:
                messages.success(request, f'Appointment "{result.value.title}" scheduled')
                return redirect(_next_url(request, 'appointments:calendar'))
            messages.error(request, result.error)
    else:
        initial = {}
        contact_id = request.GET.get('contact')
        if contact_id and contact_id.isdigit():
            initial['contact'] = int(contact_id)
        form = AppointmentForm(account=request.account, initial=initial)

    context = {
        'form': form,
        'form_title': 'New Appointment',
        'submit_text': 'Schedule',
        'cancel_url': 'appointments:calendar',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@account_required
def appointment_edit_view(request, pk):
    appointment = get_object_or_404(Appointment, pk=pk, contact__account=request.account)

    if request.method == 'POST':
        form = AppointmentEditForm(request.POST, instance=appointment, account=request.account)
        if form.is_valid():
            form.save()
            messages.success(request, 'Appointment updated')
            return redirect(_next_url(request, 'appointments:calendar'))
    else:
        form = AppointmentEditForm(instance=appointment, account=request.account)

    context = {
        'form': form,
        'form_title': f'Edit: {appointment.title}',
        'submit_text': 'Save',
        'cancel_url': 'appointments:calendar',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@account_required
@require_POST
def appointment_status_view(request, pk):
    """Complete / cancel / no-show a scheduled appointment."""
    appointment = get_object_or_404(Appointment, pk=pk, contact__account=request.account)
    status = request.POST.get('status', '')

    if status not in dict(Appointment.STATUS_CHOICES):
        if _is_ajax(request):
            return JsonResponse({'success': False, 'error': 'Invalid status'}, status=400)
        messages.error(request, 'Invalid status')
        return redirect(_next_url(request, 'appointments:calendar'))

    result = change_status(appointment, status)

    if _is_ajax(request):
        if not result.ok:
            return JsonResponse({'success': False, 'error': result.error, 'status': appointment.status}, status=400)
        return JsonResponse({
            'success': True,
            'status': appointment.status,
            'status_display': appointment.get_status_display(),
        })

    if result.ok:
        messages.success(request, f'Appointment marked {appointment.get_status_display()}')
    else:
        messages.error(request, result.error)
    return redirect(_next_url(request, 'appointments:calendar'))


@login_required
@account_required
@require_POST
def appointment_delete_view(request, pk):
    appointment = get_object_or_404(Appointment, pk=pk, contact__account=request.account)
    appointment.delete()
    logger.info("Appointment %s deleted by %s", pk, request.user.email)

    if _is_ajax(request):
        return JsonResponse({'success': True})
    messages.success(request, 'Appointment deleted')
    return redirect(_next_url(request, 'appointments:calendar'))
