import logging

from django.shortcuts import render, redirect
from django.contrib.auth import authenticate, login, logout, update_session_auth_hash
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.contrib.auth.forms import PasswordChangeForm
from django.utils.http import url_has_allowed_host_and_scheme
from django.utils.translation import gettext_lazy as _
from django.views.decorators.cache import never_cache

from apps.core.utils import get_user_account
from .models import User
from .forms import LoginForm, UserCreateForm, UserNameForm, UserSettingsForm
from .decorators import admin_required, account_required

logger = logging.getLogger(__name__)


# AUTHENTICATION VIEWS
REMEMBER_ME_SECONDS = 30 * 24 * 60 * 60


@never_cache
def login_view(request):
    if request.user.is_authenticated:
        return redirect('core:dashboard')

    form = LoginForm(request.POST or None)

    if request.method == 'POST':
        if form.is_valid():
            user = authenticate(
                request,
                username=form.cleaned_data['email'],
                password=form.cleaned_data['password'],
            )

            if user is not None:
                login(request, user)
                # Without "remember me" the session ends with the browser
                request.session.set_expiry(REMEMBER_ME_SECONDS if form.cleaned_data.get('remember') else 0)
                logger.info("User %s logged in", user.email)

                next_url = request.GET.get('next')
                if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
                    return redirect(next_url)
                return redirect('core:dashboard')

            logger.warning("Failed login for %s", form.cleaned_data['email'])
            messages.error(request, _('Invalid email or password.'))
        else:
            messages.error(request, _('Please correct the errors below.'))

    return render(request, 'accounts/login.html', {'form': form, 'page_title': _('Login')})


@login_required
def logout_view(request):
    logout(request)
    messages.success(request, _('You have been signed out.'))
    return redirect('accounts:login')



# SETTINGS VIEWS
@login_required
def settings_view(request):
    """Edit the user's name and settings (reminders, theme, default pipeline)."""
    user = request.user
    profile = user.settings
    account = get_user_account(request)

    if request.method == 'POST':
        user_form = UserNameForm(request.POST, instance=user)
        settings_form = UserSettingsForm(request.POST, instance=profile, account=account)

        if user_form.is_valid() and settings_form.is_valid():
            user_form.save()
            settings_form.save()
            messages.success(request, _('Settings saved.'))
            return redirect('accounts:settings')

        messages.error(request, _('Please correct the errors below.'))
    else:
        user_form = UserNameForm(instance=user)
        settings_form = UserSettingsForm(instance=profile, account=account)

    context = {
        'user_form': user_form,
        'settings_form': settings_form,
        'page_title': _('Settings'),
        'active_page': 'settings',
    }

    return render(request, 'accounts/settings.html', context)


@login_required
def password_change_view(request):
    if request.method == 'POST':
        form = PasswordChangeForm(user=request.user, data=request.POST)

        if form.is_valid():
            user = form.save()

            # Keep the user logged in
            update_session_auth_hash(request, user)
            messages.success(request, _('Your password has been changed successfully!'))
            return redirect('accounts:settings')

        messages.error(request, _('Please correct the errors below.'))
    else:
        form = PasswordChangeForm(user=request.user)

    context = {
        'form': form,
        'form_title': _('Change Password'),
        'submit_text': _('Change Password'),
        'cancel_url': 'accounts:settings',
    }

    return render(request, 'includes/form_page.html', context)



# TEAM (OWNERS) VIEWS
@login_required
@account_required
def user_list_view(request):
    users = User.objects.filter(account=request.account, is_active=True)

    context = {
        'users': users,
        'page_title': _('Team'),
        'active_page': 'team',
    }

    return render(request, 'accounts/user_list.html', context)


@login_required
@admin_required
@account_required
def user_create_view(request):
    if request.method == 'POST':
        form = UserCreateForm(request.POST)

        if form.is_valid():
            user = form.save(commit=False)
            user.account = request.account
            user.save()
            logger.info("User %s added to account %s", user.email, request.account.pk)
            messages.success(request, _('User {} created.').format(user.get_full_name()))
            return redirect('accounts:user_list')

        messages.error(request, _('Please correct the errors below.'))
    else:
        form = UserCreateForm()

    context = {
        'form': form,
        'form_title': _('Add Team Member'),
        'submit_text': _('Create User'),
        'cancel_url': 'accounts:user_list',
    }

    return render(request, 'includes/form_page.html', context)
