from django.urls import path
from . import api


urlpatterns = [
    path('contacts/<int:pk>/score/', api.ContactScoreAPIView.as_view(), name='contact_score_api'),
]
