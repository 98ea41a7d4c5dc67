import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.db.models import Q
from django.http import JsonResponse
from django.shortcuts import render, redirect, get_object_or_404
from django.utils import timezone
from django.views.decorators.http import require_POST

from apps.accounts.decorators import account_required
from .forms import DailyTaskForm, TaskFilterForm
from .models import DailyTask, Notification

logger = logging.getLogger(__name__)


def _is_ajax(request):
    return request.headers.get('X-Requested-With') == 'XMLHttpRequest'


def _visible_tasks(request):
    """Tasks of the sub-account the user may see: their own plus company-wide ones."""
    tasks = DailyTask.objects.filter(account=request.account).select_related('owner')
    if not request.user.is_admin():
        tasks = tasks.filter(Q(owner=request.user) | Q(is_company_wide=True))
    return tasks


@login_required
@account_required
def task_list_view(request):
    today = timezone.localdate()
    tasks = _visible_tasks(request)

    filter_form = TaskFilterForm(request.GET, account=request.account)
    show_completed = False
    if filter_form.is_valid():
        if filter_form.cleaned_data.get('owner'):
            tasks = tasks.filter(owner=filter_form.cleaned_data['owner'])
        show_completed = filter_form.cleaned_data.get('show_completed', False)

    open_tasks = tasks if show_completed else tasks.filter(completed=False)

    context = {
        'overdue_tasks': open_tasks.filter(due_date__lt=today, completed=False),
        'today_tasks': open_tasks.filter(due_date=today),
        'upcoming_tasks': open_tasks.filter(due_date__gt=today),
        'completed_today': tasks.filter(due_date=today, completed=True).count(),
        'filter_form': filter_form,
        'form': DailyTaskForm(account=request.account, initial={'due_date': today}),
        'today': today,
        'active_page': 'tasks',
    }
    return render(request, 'tasks/task_list.html', context)


@login_required
@account_required
@require_POST
def task_create_view(request):
    form = DailyTaskForm(request.POST, account=request.account)

    if form.is_valid():
        task = form.save(commit=False)
        task.account = request.account
        if task.owner is None:
            task.owner = request.user
        task.save()

        if _is_ajax(request):
            return JsonResponse({'success': True, 'task_id': task.pk})
        messages.success(request, 'Task added')
    else:
        if _is_ajax(request):
            return JsonResponse({'success': False, 'errors': form.errors}, status=400)
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)

    return redirect('tasks:task_list')


@login_required
@account_required
@require_POST
def task_toggle_view(request, pk):
    task = get_object_or_404(_visible_tasks(request), pk=pk)
    task.completed = not task.completed
    task.save(update_fields=['completed'])

    if _is_ajax(request):
        return JsonResponse({'success': True, 'completed': task.completed})
    return redirect('tasks:task_list')


@login_required
@account_required
@require_POST
def task_delete_view(request, pk):
    task = get_object_or_404(_visible_tasks(request), pk=pk)
    task.delete()
    logger.info("Task %s deleted by %s", pk, request.user.email)

    if _is_ajax(request):
        return JsonResponse({'success': True})
    messages.success(request, 'Task deleted')
    return redirect('tasks:task_list')



# NOTIFICATIONS
@login_required
def notification_list_view(request):
    notifications = Notification.objects.filter(owner=request.user)

    context = {
        'notifications': notifications[:100],
        'unread_count': notifications.filter(read=False).count(),
        'active_page': 'notifications',
    }
    return render(request, 'tasks/notification_list.html', context)


@login_required
@require_POST
def notification_read_view(request, pk):
    notification = get_object_or_404(Notification, pk=pk, owner=request.user)
    notification.read = True
    notification.save(update_fields=['read'])

    if _is_ajax(request):
        return JsonResponse({'success': True})
    if notification.link:
        return redirect(notification.link)
    return redirect('tasks:notification_list')


@login_required
@require_POST
def notification_read_all_view(request):
    updated = Notification.objects.filter(owner=request.user, read=False).update(read=True)

    if _is_ajax(request):
        return JsonResponse({'success': True, 'count': updated})
    messages.success(request, f'{updated} notification(s) marked as read')
    return redirect('tasks:notification_list')
