from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from django.shortcuts import redirect

# Main URL Configuration
# Routes all requests to appropriate apps

urlpatterns = [

    path('admin/', admin.site.urls),
    path('accounts/', include('apps.accounts.urls')),
    path('dashboard/', include('apps.core.urls')),
    path('', lambda request: redirect('core:dashboard') if request.user.is_authenticated else redirect('accounts:login')),
    path('contacts/', include('apps.contacts.urls')),
    path('pipelines/', include('apps.pipelines.urls')),
    path('calendar/', include('apps.appointments.urls')),
    path('tasks/', include('apps.tasks.urls')),
    path('agency/', include('apps.agency.urls')),
    path('automations/', include('apps.automations.urls')),

    # JSON API (kanban moves, opportunity sidebar, lead score)
    path('api/', include('apps.pipelines.api_urls')),
    path('api/', include('apps.contacts.api_urls')),

]

if settings.DEBUG:
    # Media files (user uploads: logos)
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

    # Static files (CSS, JS, images)
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
