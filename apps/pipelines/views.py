import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db.models import Q, Sum, Count
from django.http import JsonResponse
from django.shortcuts import render, redirect, get_object_or_404
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_POST

from apps.accounts.decorators import account_required, admin_required
from apps.accounts.models import User
from apps.core.views import default_pipeline_for
from .forms import PipelineForm, OpportunityForm, BulkAssignForm
from .models import Pipeline, Opportunity
from . import services

logger = logging.getLogger(__name__)


def _is_ajax(request):
    return request.headers.get('X-Requested-With') == 'XMLHttpRequest'


def _next_url(request, default):
    next_url = request.POST.get('next')
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return next_url
    return default


@login_required
@account_required
def pipeline_home_view(request):
    """Open the user's default pipeline, or the pipeline list when there is none."""
    pipeline = default_pipeline_for(request.user, request.account)
    if pipeline is None:
        return redirect('pipelines:pipeline_list')
    return redirect('pipelines:kanban', pk=pipeline.pk)


@login_required
@account_required
def kanban_view(request, pk):
    """Board of one pipeline: one column per stage, in stage order."""
    pipeline = get_object_or_404(Pipeline, pk=pk, account=request.account)

    opportunities = Opportunity.objects.filter(pipeline=pipeline) \
        .select_related('contact', 'owner')

    search_query = request.GET.get('search', '').strip()
    if search_query:
        opportunities = opportunities.filter(
            Q(contact__name__icontains=search_query) |
            Q(contact__business_name__icontains=search_query) |
            Q(contact__email__icontains=search_query)
        )

    owner_id = request.GET.get('owner', '')
    if owner_id.isdigit():
        opportunities = opportunities.filter(owner_id=int(owner_id))

    by_stage = {}
    for opportunity in opportunities:
        by_stage.setdefault(opportunity.stage, []).append(opportunity)

    columns = []
    total_count = 0
    for stage in pipeline.stages:
        cards = by_stage.pop(stage, [])
        total_count += len(cards)
        columns.append({
            'stage': stage,
            'opportunities': cards,
            'count': len(cards),
            'value': sum(card.opportunity_value or 0 for card in cards),
        })

    # Cards left over reference a stage that was renamed away
    orphaned = [card for cards in by_stage.values() for card in cards]

    context = {
        'pipeline': pipeline,
        'pipelines': Pipeline.objects.filter(account=request.account),
        'columns': columns,
        'orphaned': orphaned,
        'total_count': total_count + len(orphaned),
        'search_query': search_query,
        'owners': User.objects.filter(account=request.account, is_active=True),
        'selected_owner': owner_id,
        'add_form': OpportunityForm(account=request.account, initial={'pipeline': pipeline}),
        'active_page': 'pipelines',
    }

    return render(request, 'pipelines/kanban.html', context)


@login_required
@account_required
@require_POST
def opportunity_add_view(request):
    form = OpportunityForm(request.POST, account=request.account)

    if not form.is_valid():
        if _is_ajax(request):
            return JsonResponse({'success': False, 'errors': form.errors}, status=400)
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
        return redirect(_next_url(request, 'pipelines:home'))

    data = form.cleaned_data
    result = services.add_opportunity(
        data['contact'],
        data['pipeline'],
        stage=data['stage'],
        owner=data.get('owner') or data['contact'].owner,
        value=data.get('opportunity_value'),
        next_follow_up_date=data.get('next_follow_up_date'),
    )

    if _is_ajax(request):
        if not result.ok:
            return JsonResponse({'success': False, 'error': result.error}, status=400)
        return JsonResponse({'success': True, 'opportunity_id': result.value.pk, 'stage': result.value.stage})

    if result.ok:
        messages.success(request, f'{data["contact"].name} added to {data["pipeline"].name}')
    else:
        messages.error(request, result.error)
    return redirect(_next_url(request, data['pipeline'].get_absolute_url()))


@login_required
@account_required
@require_POST
def opportunity_delete_view(request, pk):
    opportunity = get_object_or_404(Opportunity, pk=pk, pipeline__account=request.account)
    pipeline = opportunity.pipeline
    result = services.delete_opportunity(opportunity)

    if _is_ajax(request):
        if not result.ok:
            return JsonResponse({'success': False, 'error': result.error}, status=500)
        return JsonResponse({'success': True})

    if result.ok:
        messages.success(request, 'Opportunity removed from pipeline')
    else:
        messages.error(request, result.error)
    return redirect(_next_url(request, pipeline.get_absolute_url()))


@login_required
@account_required
@require_POST
def bulk_assign_view(request):
    """Bulk "add to pipeline" from the contact list."""
    form = BulkAssignForm(request.POST, account=request.account)

    if not form.is_valid():
        message = '; '.join(error for errors in form.errors.values() for error in errors)
        if _is_ajax(request):
            return JsonResponse({'success': False, 'error': message}, status=400)
        messages.error(request, message)
        return redirect('contacts:contact_list')

    data = form.cleaned_data
    result = services.bulk_assign(
        data['contact_ids'],
        data['pipeline'],
        stage=data['stage'],
        owner=data.get('owner'),
    )

    if not result.ok:
        if _is_ajax(request):
            return JsonResponse({'success': False, 'error': result.error}, status=400)
        messages.error(request, result.error)
        return redirect('contacts:contact_list')

    count = len(result.value)
    message = f'{count} contact(s) added to {data["pipeline"].name}'
    if _is_ajax(request):
        return JsonResponse({'success': True, 'count': count, 'message': message})

    messages.success(request, message)
    return redirect('pipelines:kanban', pk=data['pipeline'].pk)



# PIPELINE CRUD
@login_required
@account_required
def pipeline_list_view(request):
    pipelines = Pipeline.objects.filter(account=request.account).annotate(
        opportunities_count=Count('opportunities'),
        total_value=Sum('opportunities__opportunity_value'),
    )

    context = {
        'pipelines': pipelines,
        'active_page': 'pipelines',
    }
    return render(request, 'pipelines/pipeline_list.html', context)


@login_required
@admin_required
@account_required
def pipeline_create_view(request):
    if request.method == 'POST':
        form = PipelineForm(request.POST)
        if form.is_valid():
            pipeline = form.save(commit=False)
            pipeline.account = request.account
            pipeline.save()
            logger.info("Pipeline %s created in account %s", pipeline.pk, request.account.pk)
            messages.success(request, f'Pipeline "{pipeline.name}" created')
            return redirect('pipelines:kanban', pk=pipeline.pk)
    else:
        form = PipelineForm(initial={'stages_text': '\n'.join(request.account.pipeline_stages or [])})

    context = {
        'form': form,
        'form_title': 'New Pipeline',
        'submit_text': 'Create Pipeline',
        'cancel_url': 'pipelines:pipeline_list',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@admin_required
@account_required
def pipeline_edit_view(request, pk):
    pipeline = get_object_or_404(Pipeline, pk=pk, account=request.account)

    if request.method == 'POST':
        form = PipelineForm(request.POST, instance=pipeline)
        if form.is_valid():
            pipeline = form.save()
            orphaned = [o.pk for o in pipeline.opportunities.all() if o.is_orphaned()]
            if orphaned:
                messages.warning(
                    request,
                    f'{len(orphaned)} opportunity(ies) reference a stage that no longer exists'
                )
            messages.success(request, 'Pipeline updated')
            return redirect('pipelines:kanban', pk=pipeline.pk)
    else:
        form = PipelineForm(instance=pipeline)

    context = {
        'form': form,
        'form_title': f'Edit: {pipeline.name}',
        'submit_text': 'Save Pipeline',
        'cancel_url': 'pipelines:pipeline_list',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@admin_required
@account_required
@require_POST
def pipeline_delete_view(request, pk):
    pipeline = get_object_or_404(Pipeline, pk=pk, account=request.account)
    name = pipeline.name
    pipeline.delete()
    logger.info("Pipeline %s deleted by %s", pk, request.user.email)
    messages.success(request, f'Pipeline "{name}" deleted')
    return redirect('pipelines:pipeline_list')
