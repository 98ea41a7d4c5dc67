from django.urls import path
from . import api


urlpatterns = [
    path('opportunities/<int:pk>/', api.OpportunityDetailAPIView.as_view(), name='opportunity_api'),
    path('opportunities/<int:pk>/move/', api.OpportunityMoveAPIView.as_view(), name='opportunity_move_api'),
]
