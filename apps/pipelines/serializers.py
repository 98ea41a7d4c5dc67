from rest_framework import serializers

from .models import Pipeline, Opportunity


class OpportunitySerializer(serializers.ModelSerializer):
    contact_name = serializers.CharField(source='contact.name', read_only=True)
    pipeline_name = serializers.CharField(source='pipeline.name', read_only=True)

    class Meta:
        model = Opportunity
        fields = [
            'id', 'contact', 'contact_name', 'pipeline', 'pipeline_name', 'stage',
            'opportunity_value', 'next_follow_up_date', 'owner', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class _AccountPipelineMixin:
    """Limits the ``pipeline`` field to the pipelines of the given sub-account."""

    def __init__(self, *args, account=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['pipeline'].queryset = Pipeline.objects.filter(account=account)


class OpportunityMoveSerializer(_AccountPipelineMixin, serializers.Serializer):
    """Body of a kanban drop: the target stage, optionally in another pipeline."""

    stage = serializers.CharField(max_length=100)
    pipeline = serializers.PrimaryKeyRelatedField(queryset=Pipeline.objects.none(), required=False)


class OpportunityUpdateSerializer(_AccountPipelineMixin, serializers.Serializer):
    """Sidebar save; every field is optional, null clears value and follow-up date."""

    pipeline = serializers.PrimaryKeyRelatedField(queryset=Pipeline.objects.none(), required=False)
    stage = serializers.CharField(max_length=100, required=False)
    opportunity_value = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    next_follow_up_date = serializers.DateField(required=False, allow_null=True)
