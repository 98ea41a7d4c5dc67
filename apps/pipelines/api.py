"""
Opportunity JSON API used by the kanban board and the opportunity sidebar.

POST  /api/opportunities/<pk>/move/   {"stage": "...", "pipeline": <id>?}
GET   /api/opportunities/<pk>/
PATCH /api/opportunities/<pk>/        {"pipeline", "stage", "opportunity_value", "next_follow_up_date"}

Writes go through ``apps.pipelines.services``; an invalid stage or a
failed write answers 400 with the opportunity as it is stored, so the
board can put the card back.
"""
import logging

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.results import Result
from apps.core.utils import get_user_account
from . import services
from .models import Opportunity
from .serializers import OpportunitySerializer, OpportunityMoveSerializer, OpportunityUpdateSerializer

logger = logging.getLogger(__name__)


class _OpportunityMixin:

    def get_opportunity(self, request, pk):
        account = get_user_account(request)
        return get_object_or_404(
            Opportunity.objects.select_related('pipeline', 'contact'),
            pk=pk,
            pipeline__account=account,
        )

    def result_response(self, result):
        payload = {
            'success': result.ok,
            'opportunity': OpportunitySerializer(result.value).data if result.value is not None else None,
        }
        if not result.ok:
            payload['error'] = result.error
            return Response(payload, status=status.HTTP_400_BAD_REQUEST)
        return Response(payload)


class OpportunityMoveAPIView(_OpportunityMixin, APIView):

    def post(self, request, pk):
        opportunity = self.get_opportunity(request, pk)
        serializer = OpportunityMoveSerializer(data=request.data, account=opportunity.pipeline.account)
        if not serializer.is_valid():
            return Response({'success': False, 'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        stage = serializer.validated_data['stage']
        pipeline = serializer.validated_data.get('pipeline')

        if pipeline is not None and pipeline.pk != opportunity.pipeline_id:
            result = services.change_pipeline(opportunity, pipeline, stage=stage, user=request.user)
        else:
            result = services.move_stage(opportunity, stage, user=request.user)

        if not result.ok:
            # Hand back the stored row so the card returns to its column
            opportunity.refresh_from_db()
            result = Result.failure(result.error, value=opportunity)
        return self.result_response(result)


class OpportunityDetailAPIView(_OpportunityMixin, APIView):

    def get(self, request, pk):
        opportunity = self.get_opportunity(request, pk)
        return Response(OpportunitySerializer(opportunity).data)

    def patch(self, request, pk):
        opportunity = self.get_opportunity(request, pk)
        serializer = OpportunityUpdateSerializer(data=request.data, account=opportunity.pipeline.account)
        if not serializer.is_valid():
            return Response({'success': False, 'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        result = services.update_opportunity(
            opportunity,
            pipeline=data.get('pipeline'),
            stage=data.get('stage'),
            value=data.get('opportunity_value', services.UNSET),
            next_follow_up_date=data.get('next_follow_up_date', services.UNSET),
            user=request.user,
        )
        if not result.ok:
            opportunity.refresh_from_db()
            result = Result.failure(result.error, value=opportunity)
        return self.result_response(result)
