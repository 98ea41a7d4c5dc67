from django.shortcuts import get_object_or_404
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.utils import get_user_account
from .models import Contact


class ContactScoreAPIView(APIView):
    """
    GET /api/contacts/<pk>/score/

    Computed lead score with its per-bucket breakdown, next to the stored
    hot/warm/cold category.
    """

    def get(self, request, pk):
        account = get_user_account(request)
        contact = get_object_or_404(Contact, pk=pk, account=account)
        breakdown = contact.score_breakdown()

        data = breakdown.as_dict()
        data['contact_id'] = contact.pk
        data['lead_score'] = contact.lead_score
        return Response(data)
