import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db.models import Count, Sum, Q
from django.shortcuts import render, redirect, get_object_or_404
from django.utils import timezone
from django.views.decorators.http import require_POST

from apps.accounts.decorators import account_required, admin_required
from apps.appointments.models import Appointment
from apps.contacts.models import Contact, Activity
from apps.pipelines.models import Pipeline, Opportunity
from .forms import AccountForm, TagForm, EmailTemplateForm
from .models import Account, Tag, EmailTemplate
from .reports import build_report
from .utils import get_user_account, set_selected_account

logger = logging.getLogger(__name__)

CLOSED_STAGES = ('Closed Won', 'Closed Lost')


def default_pipeline_for(user, account):
    """The user's preferred pipeline when it belongs to ``account``, else the oldest one."""
    preferred = user.settings.default_pipeline
    if preferred is not None and preferred.account_id == account.pk:
        return preferred
    return Pipeline.objects.filter(account=account).first()


@login_required
def account_selector_view(request):
    """
    Sub-account selector for superusers
    Simple page to choose which sub-account to manage
    """
    if not request.user.is_superuser:
        return redirect('core:dashboard')

    account_id = request.GET.get('account_id')
    if account_id:
        if set_selected_account(request, account_id):
            return redirect('core:dashboard')
        messages.error(request, 'Sub-account not found.')

    context = {
        'accounts': Account.objects.annotate(contacts_count=Count('contacts')).order_by('name'),
        'selected_account': get_user_account(request),
    }

    return render(request, 'core/account_selector.html', context)


@login_required
def account_create_view(request):
    """Create a sub-account (superuser only) together with its default pipeline."""
    if not request.user.is_superuser:
        messages.error(request, 'Only the agency owner can create sub-accounts.')
        return redirect('core:dashboard')

    if request.method == 'POST':
        form = AccountForm(request.POST, request.FILES)
        if form.is_valid():
            account = form.save()
            account.create_default_pipeline()
            set_selected_account(request, account.pk)
            logger.info("Sub-account %s created by %s", account.pk, request.user.email)
            messages.success(request, f'Sub-account "{account.name}" created.')
            return redirect('core:dashboard')
    else:
        form = AccountForm()

    context = {
        'form': form,
        'form_title': 'New Sub-account',
        'submit_text': 'Create',
        'cancel_url': 'core:account_selector',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@admin_required
@account_required
def account_settings_view(request):
    account = request.account

    if request.method == 'POST':
        form = AccountForm(request.POST, request.FILES, instance=account)
        if form.is_valid():
            form.save()
            messages.success(request, 'Sub-account settings updated successfully.')
            return redirect('core:account_settings')
    else:
        form = AccountForm(instance=account)

    context = {
        'form': form,
        'form_title': 'Sub-account Settings',
        'submit_text': 'Save',
        'cancel_url': 'core:dashboard',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@account_required
def dashboard_view(request):
    """
    Main dashboard view
    - Stat cards: contacts, open opportunities, pipeline value, appointments today
    - Stage distribution of the default pipeline
    - Activities logged per owner
    """
    account = request.account
    today = timezone.localdate()

    contacts_qs = Contact.objects.filter(account=account)
    opportunities_qs = Opportunity.objects.filter(pipeline__account=account)
    open_qs = opportunities_qs.exclude(stage__in=CLOSED_STAGES)

    # 1. Key Metrics
    total_contacts = contacts_qs.count()
    open_opportunities = open_qs.count()
    pipeline_value = open_qs.aggregate(total=Sum('opportunity_value'))['total'] or 0
    appointments_today = Appointment.objects.filter(
        contact__account=account,
        datetime__date=today,
        status=Appointment.STATUS_SCHEDULED,
    ).count()

    # 2. Stage distribution (one query, then ordered by the pipeline's stages)
    pipeline = default_pipeline_for(request.user, account)
    stage_distribution = []
    if pipeline is not None:
        rows = opportunities_qs.filter(pipeline=pipeline).values('stage').annotate(
            count=Count('id'), value=Sum('opportunity_value'),
        )
        stage_map = {row['stage']: row for row in rows}
        pipeline_total = sum(row['count'] for row in rows)
        for stage in pipeline.stages:
            row = stage_map.get(stage, {})
            count = row.get('count', 0)
            stage_distribution.append({
                'name': stage,
                'count': count,
                'value': row.get('value') or 0,
                'percentage': (count / pipeline_total * 100) if pipeline_total else 0,
            })

    # 3. Output by owner
    activity_by_owner = (
        Activity.objects.filter(contact__account=account, logged_by__isnull=False)
        .values('logged_by', 'logged_by__first_name', 'logged_by__last_name', 'logged_by__email')
        .annotate(
            total=Count('id'),
            today=Count('id', filter=Q(logged_at__date=today)),
            meetings=Count('id', filter=Q(outcome='Meeting Booked')),
        )
        .order_by('-total')
    )

    recent_activities = Activity.objects.filter(contact__account=account) \
        .select_related('contact', 'logged_by')[:10]

    context = {
        'account': account,
        'total_contacts': total_contacts,
        'open_opportunities': open_opportunities,
        'pipeline_value': pipeline_value,
        'appointments_today': appointments_today,
        'pipeline': pipeline,
        'stage_distribution': stage_distribution,
        'activity_by_owner': activity_by_owner,
        'recent_activities': recent_activities,
        'active_page': 'dashboard',
    }

    return render(request, 'core/dashboard.html', context)


@login_required
@account_required
def reports_view(request):
    """Month-over-month KPIs, pipeline breakdown, activity and lead score mix."""
    context = build_report(request.account)
    context.update({
        'account': request.account,
        'active_page': 'reports',
    })
    return render(request, 'core/reports.html', context)



# TAGS
@login_required
@account_required
def tag_list_view(request):
    if request.method == 'POST':
        form = TagForm(request.POST)
        if form.is_valid():
            tag = form.save()
            messages.success(request, f'Tag "{tag.name}" created.')
            return redirect('core:tag_list')
        messages.error(request, 'Please correct the errors below.')
    else:
        form = TagForm()

    tags = Tag.objects.annotate(
        contacts_count=Count('contacts_taggedcontact_items',
                             filter=Q(contacts_taggedcontact_items__content_object__account=request.account)),
    )

    context = {
        'tags': tags,
        'form': form,
        'active_page': 'tags',
    }
    return render(request, 'core/tag_list.html', context)


@login_required
@admin_required
@require_POST
def tag_delete_view(request, pk):
    tag = get_object_or_404(Tag, pk=pk)
    name = tag.name
    tag.delete()
    logger.info("Tag %s deleted by %s", name, request.user.email)
    messages.success(request, f'Tag "{name}" deleted.')
    return redirect('core:tag_list')



# EMAIL TEMPLATES
@login_required
@account_required
def email_template_list_view(request):
    templates = EmailTemplate.objects.filter(account=request.account).select_related('created_by')
    context = {
        'templates': templates,
        'active_page': 'email_templates',
    }
    return render(request, 'core/email_template_list.html', context)


@login_required
@account_required
def email_template_create_view(request):
    if request.method == 'POST':
        form = EmailTemplateForm(request.POST)
        if form.is_valid():
            template = form.save(commit=False)
            template.account = request.account
            template.created_by = request.user
            template.save()
            messages.success(request, 'Email template created.')
            return redirect('core:email_template_list')
    else:
        form = EmailTemplateForm()

    context = {
        'form': form,
        'form_title': 'New Email Template',
        'submit_text': 'Create',
        'cancel_url': 'core:email_template_list',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@account_required
def email_template_edit_view(request, pk):
    template = get_object_or_404(EmailTemplate, pk=pk, account=request.account)

    if request.method == 'POST':
        form = EmailTemplateForm(request.POST, instance=template)
        if form.is_valid():
            form.save()
            messages.success(request, 'Email template updated.')
            return redirect('core:email_template_list')
    else:
        form = EmailTemplateForm(instance=template)

    context = {
        'form': form,
        'form_title': f'Edit: {template.name}',
        'submit_text': 'Save',
        'cancel_url': 'core:email_template_list',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@account_required
@require_POST
def email_template_delete_view(request, pk):
    template = get_object_or_404(EmailTemplate, pk=pk, account=request.account)
    template.delete()
    messages.success(request, 'Email template deleted.')
    return redirect('core:email_template_list')
