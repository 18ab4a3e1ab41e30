"""
Serializers for contact, tag, opportunity, pipeline and task endpoints.
"""

from rest_framework import serializers

from tasks.domain.task import TASK_TYPES


class ContactRequestSerializer(serializers.Serializer):
    first_name = serializers.CharField(max_length=100)
    last_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    company_name = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    job_title = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    contact_type = serializers.CharField(required=False)
    status = serializers.CharField(required=False)
    source = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    score = serializers.IntegerField(required=False, min_value=0, max_value=100)
    assigned_to = serializers.IntegerField(required=False, allow_null=True)


class ContactUpdateRequestSerializer(ContactRequestSerializer):
    first_name = serializers.CharField(required=False, max_length=100)


class ContactImportRequestSerializer(serializers.Serializer):
    contacts = serializers.ListField(child=serializers.DictField(), min_length=1)


class ScoreRequestSerializer(serializers.Serializer):
    score = serializers.IntegerField(min_value=0, max_value=100)


class ContactSerializer(serializers.Serializer):
    """Serializer for Contact."""

    id = serializers.UUIDField()
    first_name = serializers.CharField()
    last_name = serializers.CharField(allow_null=True)
    full_name = serializers.CharField()
    email = serializers.CharField(allow_null=True)
    phone = serializers.CharField(allow_null=True)
    company_name = serializers.CharField(allow_null=True)
    job_title = serializers.CharField(allow_null=True)
    contact_type = serializers.CharField()
    status = serializers.CharField()
    source = serializers.CharField(allow_null=True)
    notes = serializers.CharField(allow_null=True)
    score = serializers.IntegerField()
    assigned_to = serializers.IntegerField(allow_null=True)
    last_contact_date = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class ContactSummarySerializer(serializers.Serializer):
    id = serializers.UUIDField()
    full_name = serializers.CharField()
    email = serializers.CharField(allow_null=True)
    company_name = serializers.CharField(allow_null=True)


class ContactStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    new_this_month = serializers.IntegerField()
    by_type = serializers.DictField(child=serializers.IntegerField())
    by_status = serializers.DictField(child=serializers.IntegerField())


class TagRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50)
    color = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=7)


class TagSerializer(serializers.Serializer):
    """Serializer for Tag."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    color = serializers.CharField()
    created_at = serializers.DateTimeField()


class ContactWithTagsSerializer(serializers.Serializer):
    contact = ContactSerializer()
    tags = TagSerializer(many=True)


class InteractionRequestSerializer(serializers.Serializer):
    subject = serializers.CharField(max_length=255)
    interaction_type = serializers.CharField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    interaction_date = serializers.DateTimeField(required=False, allow_null=True)


class InteractionSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    contact_id = serializers.UUIDField()
    interaction_type = serializers.CharField()
    subject = serializers.CharField()
    notes = serializers.CharField(allow_null=True)
    interaction_date = serializers.DateTimeField()
    user_id = serializers.IntegerField(allow_null=True)
    created_at = serializers.DateTimeField()


class PipelineStageRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    color = serializers.CharField(required=False, max_length=7)
    probability = serializers.IntegerField(required=False, min_value=0, max_value=100)
    order_index = serializers.IntegerField(required=False, min_value=0)


class PipelineRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    stages = PipelineStageRequestSerializer(many=True, required=False)


class PipelineStageSerializer(serializers.Serializer):
    """Serializer for PipelineStage and StageSummary."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    color = serializers.CharField()
    probability = serializers.IntegerField()
    order_index = serializers.IntegerField(required=False)


class PipelineSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    stages = PipelineStageSerializer(many=True)
    created_at = serializers.DateTimeField()


class OpportunityRequestSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    value = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    contact_id = serializers.UUIDField(required=False, allow_null=True)
    pipeline_id = serializers.UUIDField(required=False, allow_null=True)
    stage_id = serializers.UUIDField(required=False, allow_null=True)
    expected_close_date = serializers.DateField(required=False, allow_null=True)
    assigned_to = serializers.IntegerField(required=False, allow_null=True)


class OpportunityUpdateRequestSerializer(OpportunityRequestSerializer):
    title = serializers.CharField(required=False, max_length=255)


class StageMoveRequestSerializer(serializers.Serializer):
    stage_id = serializers.UUIDField()


class LostRequestSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class OpportunitySerializer(serializers.Serializer):
    """Serializer for Opportunity."""

    id = serializers.UUIDField()
    title = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    value = serializers.DecimalField(max_digits=12, decimal_places=2)
    contact_id = serializers.UUIDField(allow_null=True)
    pipeline_id = serializers.UUIDField(allow_null=True)
    stage_id = serializers.UUIDField(allow_null=True)
    status = serializers.CharField()
    expected_close_date = serializers.DateField(allow_null=True)
    actual_close_date = serializers.DateField(allow_null=True)
    lost_reason = serializers.CharField(allow_null=True)
    assigned_to = serializers.IntegerField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class OpportunityDetailSerializer(serializers.Serializer):
    opportunity = OpportunitySerializer()
    contact = ContactSummarySerializer(allow_null=True)
    stage = PipelineStageSerializer(allow_null=True)


class StageColumnSerializer(serializers.Serializer):
    stage = PipelineStageSerializer()
    opportunities = OpportunityDetailSerializer(many=True)
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)


class OpportunityMetricsSerializer(serializers.Serializer):
    total_open_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_won_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_lost_value = serializers.DecimalField(max_digits=14, decimal_places=2)
    open_count = serializers.IntegerField()
    won_count = serializers.IntegerField()
    lost_count = serializers.IntegerField()
    win_rate = serializers.DecimalField(max_digits=5, decimal_places=2)
    average_deal_size = serializers.DecimalField(max_digits=14, decimal_places=2)


class TaskRequestSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    task_type = serializers.ChoiceField(choices=TASK_TYPES, required=False)
    priority = serializers.CharField(required=False)
    status = serializers.CharField(required=False)
    due_date = serializers.DateTimeField(required=False, allow_null=True)
    contact_id = serializers.UUIDField(required=False, allow_null=True)
    opportunity_id = serializers.UUIDField(required=False, allow_null=True)
    assigned_to = serializers.IntegerField(required=False, allow_null=True)


class TaskUpdateRequestSerializer(TaskRequestSerializer):
    title = serializers.CharField(required=False, max_length=255)


class TaskSerializer(serializers.Serializer):
    """Serializer for Task."""

    id = serializers.UUIDField()
    title = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    task_type = serializers.CharField()
    priority = serializers.CharField()
    status = serializers.CharField()
    due_date = serializers.DateTimeField(allow_null=True)
    completed_at = serializers.DateTimeField(allow_null=True)
    contact_id = serializers.UUIDField(allow_null=True)
    opportunity_id = serializers.UUIDField(allow_null=True)
    assigned_to = serializers.IntegerField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class TaskDetailSerializer(serializers.Serializer):
    task = TaskSerializer()
    contact = ContactSummarySerializer(allow_null=True)
    opportunity_title = serializers.CharField(allow_null=True)


class TaskStatsSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    pending = serializers.IntegerField()
    completed = serializers.IntegerField()
    overdue = serializers.IntegerField()
