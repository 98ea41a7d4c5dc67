import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.shortcuts import render, redirect, get_object_or_404
from django.views.decorators.http import require_POST

from apps.accounts.decorators import account_required, admin_required
from .forms import AutomationForm
from .models import Automation

logger = logging.getLogger(__name__)


@login_required
@account_required
def automation_list_view(request):
    automations = Automation.objects.filter(account=request.account)

    context = {
        'automations': automations,
        'active_count': automations.filter(status='active').count(),
        'active_page': 'automations',
    }
    return render(request, 'automations/automation_list.html', context)


@login_required
@admin_required
@account_required
def automation_create_view(request):
    if request.method == 'POST':
        form = AutomationForm(request.POST)
        if form.is_valid():
            automation = form.save(commit=False)
            automation.account = request.account
            automation.save()
            logger.info("Automation %s created in account %s", automation.pk, request.account.pk)
            messages.success(request, f'Automation "{automation.name}" created')
            return redirect('automations:automation_list')
    else:
        form = AutomationForm()

    context = {
        'form': form,
        'form_title': 'New Automation',
        'submit_text': 'Create',
        'cancel_url': 'automations:automation_list',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@admin_required
@account_required
def automation_edit_view(request, pk):
    automation = get_object_or_404(Automation, pk=pk, account=request.account)

    if request.method == 'POST':
        form = AutomationForm(request.POST, instance=automation)
        if form.is_valid():
            form.save()
            messages.success(request, 'Automation updated')
            return redirect('automations:automation_list')
    else:
        form = AutomationForm(instance=automation)

    context = {
        'form': form,
        'form_title': f'Edit: {automation.name}',
        'submit_text': 'Save',
        'cancel_url': 'automations:automation_list',
    }
    return render(request, 'includes/form_page.html', context)


@login_required
@admin_required
@account_required
@require_POST
def automation_toggle_view(request, pk):
    automation = get_object_or_404(Automation, pk=pk, account=request.account)
    status = automation.toggle()

    if request.headers.get('X-Requested-With') == 'XMLHttpRequest':
        return JsonResponse({'success': True, 'status': status})
    messages.success(request, f'Automation "{automation.name}" is now {automation.get_status_display().lower()}')
    return redirect('automations:automation_list')


@login_required
@admin_required
@account_required
@require_POST
def automation_delete_view(request, pk):
    automation = get_object_or_404(Automation, pk=pk, account=request.account)
    automation.delete()
    messages.success(request, 'Automation deleted')
    return redirect('automations:automation_list')
