"""
Contact, tag, opportunity, pipeline and task API views.
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.crm.serializers import (
    ContactImportRequestSerializer,
    ContactRequestSerializer,
    ContactSerializer,
    ContactStatsSerializer,
    ContactUpdateRequestSerializer,
    ContactWithTagsSerializer,
    InteractionRequestSerializer,
    InteractionSerializer,
    LostRequestSerializer,
    OpportunityDetailSerializer,
    OpportunityMetricsSerializer,
    OpportunityRequestSerializer,
    OpportunitySerializer,
    OpportunityUpdateRequestSerializer,
    PipelineRequestSerializer,
    PipelineSerializer,
    ScoreRequestSerializer,
    StageColumnSerializer,
    StageMoveRequestSerializer,
    TagRequestSerializer,
    TagSerializer,
    TaskDetailSerializer,
    TaskRequestSerializer,
    TaskSerializer,
    TaskStatsSerializer,
    TaskUpdateRequestSerializer,
)
from api.responses import actor_of, envelope_response, user_id_of
from contacts.application.services.contact_service import ContactService
from contacts.application.services.tag_service import TagService
from contacts.infrastructure.repositories.django_contact_repository import DjangoContactRepository
from contacts.infrastructure.repositories.django_interaction_repository import (
    DjangoInteractionRepository,
)
from contacts.infrastructure.repositories.django_tag_repository import DjangoTagRepository
from core.infrastructure.events import event_bus
from core.instrumentation import get_tracer
from opportunities.application.services.opportunity_service import OpportunityService
from opportunities.infrastructure.repositories.django_opportunity_repository import (
    DjangoOpportunityRepository,
)
from opportunities.infrastructure.repositories.django_pipeline_repository import (
    DjangoPipelineRepository,
)
from tasks.application.services.task_service import TaskService
from tasks.infrastructure.repositories.django_task_repository import DjangoTaskRepository

_contact_repo = DjangoContactRepository()
_tag_repo = DjangoTagRepository()
_interaction_repo = DjangoInteractionRepository()
_opportunity_repo = DjangoOpportunityRepository()
_pipeline_repo = DjangoPipelineRepository()
_task_repo = DjangoTaskRepository()

tracer = get_tracer(__name__)

CONTACT_FILTERS = ("contact_type", "status", "assigned_to", "tag_id", "search", "page", "per_page")
OPPORTUNITY_FILTERS = ("status", "stage_id", "pipeline_id", "assigned_to", "contact_id")
TASK_FILTERS = ("status", "priority", "assigned_to", "contact_id", "opportunity_id", "due_date_from", "due_date_to")


def _contact_service() -> ContactService:
    return ContactService(
        contact_repository=_contact_repo,
        tag_repository=_tag_repo,
        interaction_repository=_interaction_repo,
        opportunity_repository=_opportunity_repo,
        task_repository=_task_repo,
        event_bus=event_bus,
    )


def _tag_service() -> TagService:
    return TagService(tag_repository=_tag_repo, contact_repository=_contact_repo)


def _opportunity_service() -> OpportunityService:
    return OpportunityService(
        opportunity_repository=_opportunity_repo,
        pipeline_repository=_pipeline_repo,
        event_bus=event_bus,
    )


def _task_service() -> TaskService:
    return TaskService(task_repository=_task_repo, event_bus=event_bus)


def _query_filters(request: Request, names) -> dict:
    return {name: request.query_params[name] for name in names if request.query_params.get(name)}


# Contacts


class ContactListView(APIView):
    """Paginated contact list and contact creation."""

    @extend_schema(
        operation_id="list_contacts",
        summary="List contacts",
        tags=["CRM"],
        parameters=[OpenApiParameter(name, str) for name in CONTACT_FILTERS],
        responses={200: ContactSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_contacts") as span:
            result = await _contact_service().get_contacts(_query_filters(request, CONTACT_FILTERS))
            if result.pagination is not None:
                span.set_attribute("contacts.total", result.pagination.total)
            return envelope_response(result, ContactSerializer, many=True, span=span)

    @extend_schema(
        operation_id="create_contact",
        summary="Create contact",
        tags=["CRM"],
        request=ContactRequestSerializer,
        responses={201: ContactSerializer, 400: {"description": "Bad Request"}, 409: {"description": "Conflict"}},
    )
    def post(self, request: Request) -> Response:
        serializer = ContactRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_contact_service().create_contact)(serializer.validated_data, user_id_of(request))
        return envelope_response(result, ContactSerializer, success_status=status.HTTP_201_CREATED)


class ContactSearchView(APIView):
    @extend_schema(
        operation_id="search_contacts",
        summary="Search contacts",
        tags=["CRM"],
        parameters=[OpenApiParameter("q", str, required=True)],
        responses={200: ContactSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        result = async_to_sync(_contact_service().search_contacts)(request.query_params.get("q", ""))
        return envelope_response(result, ContactSerializer, many=True)


class ContactsWithTagsView(APIView):
    @extend_schema(
        operation_id="list_contacts_with_tags",
        summary="List contacts with their tags",
        tags=["CRM"],
        responses={200: ContactWithTagsSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        result = async_to_sync(_contact_service().get_contacts_with_tags)()
        return envelope_response(result, ContactWithTagsSerializer, many=True)


class ContactImportView(APIView):
    @extend_schema(
        operation_id="import_contacts",
        summary="Import contacts",
        description="All rows are stored or none is.",
        tags=["CRM"],
        request=ContactImportRequestSerializer,
        responses={201: ContactSerializer(many=True), 400: {"description": "Bad Request"}},
    )
    def post(self, request: Request) -> Response:
        serializer = ContactImportRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_contact_service().import_contacts)(
            serializer.validated_data["contacts"], user_id_of(request)
        )
        return envelope_response(result, ContactSerializer, many=True, success_status=status.HTTP_201_CREATED)


class ContactStatsView(APIView):
    @extend_schema(
        operation_id="contact_stats",
        summary="Contact totals of the current user",
        tags=["CRM"],
        responses={200: ContactStatsSerializer},
    )
    def get(self, request: Request) -> Response:
        result = async_to_sync(_contact_service().get_contact_stats)(user_id_of(request))
        return envelope_response(result, ContactStatsSerializer)


class ContactDetailView(APIView):
    @extend_schema(
        operation_id="get_contact",
        summary="Get contact",
        tags=["CRM"],
        responses={200: ContactSerializer, 404: {"description": "Not Found"}},
    )
    def get(self, request: Request, contact_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_contact_service().get_contact_by_id)(contact_id), ContactSerializer)

    @extend_schema(
        operation_id="update_contact",
        summary="Update contact",
        tags=["CRM"],
        request=ContactUpdateRequestSerializer,
        responses={200: ContactSerializer, 404: {"description": "Not Found"}},
    )
    def put(self, request: Request, contact_id: uuid.UUID) -> Response:
        serializer = ContactUpdateRequestSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_contact_service().update_contact)(contact_id, serializer.validated_data)
        return envelope_response(result, ContactSerializer)

    @extend_schema(operation_id="delete_contact", summary="Delete contact", tags=["CRM"], responses={200: None})
    def delete(self, request: Request, contact_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_contact_service().delete_contact)(contact_id))


class ContactScoreView(APIView):
    @extend_schema(
        operation_id="update_contact_score",
        summary="Set contact score",
        tags=["CRM"],
        request=ScoreRequestSerializer,
        responses={200: ContactSerializer, 404: {"description": "Not Found"}},
    )
    def patch(self, request: Request, contact_id: uuid.UUID) -> Response:
        serializer = ScoreRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_contact_service().update_contact_score)(
            contact_id, serializer.validated_data["score"]
        )
        return envelope_response(result, ContactSerializer)


class ContactInteractionsView(APIView):
    """Interaction log of a contact."""

    @extend_schema(
        operation_id="list_contact_interactions",
        summary="List interactions",
        tags=["CRM"],
        responses={200: InteractionSerializer(many=True)},
    )
    def get(self, request: Request, contact_id: uuid.UUID) -> Response:
        result = async_to_sync(_contact_service().get_contact_interactions)(contact_id)
        return envelope_response(result, InteractionSerializer, many=True)

    @extend_schema(
        operation_id="add_contact_interaction",
        summary="Add interaction",
        description="Also moves the contact's last contact date forward.",
        tags=["CRM"],
        request=InteractionRequestSerializer,
        responses={201: InteractionSerializer, 404: {"description": "Not Found"}},
    )
    def post(self, request: Request, contact_id: uuid.UUID) -> Response:
        serializer = InteractionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_contact_service().add_interaction)(
            contact_id, serializer.validated_data, user_id_of(request)
        )
        return envelope_response(result, InteractionSerializer, success_status=status.HTTP_201_CREATED)


class ContactOpportunitiesView(APIView):
    @extend_schema(
        operation_id="list_contact_opportunities",
        summary="Opportunities of a contact",
        tags=["CRM"],
        responses={200: OpportunityDetailSerializer(many=True)},
    )
    def get(self, request: Request, contact_id: uuid.UUID) -> Response:
        result = async_to_sync(_contact_service().get_contact_opportunities)(contact_id)
        return envelope_response(result, OpportunityDetailSerializer, many=True)


class ContactTasksView(APIView):
    @extend_schema(
        operation_id="list_contact_tasks",
        summary="Tasks of a contact",
        tags=["CRM"],
        responses={200: TaskDetailSerializer(many=True)},
    )
    def get(self, request: Request, contact_id: uuid.UUID) -> Response:
        result = async_to_sync(_contact_service().get_contact_tasks)(contact_id)
        return envelope_response(result, TaskDetailSerializer, many=True)


class ContactTagsView(APIView):
    @extend_schema(
        operation_id="list_contact_tags",
        summary="Tags of a contact",
        tags=["CRM"],
        responses={200: TagSerializer(many=True)},
    )
    def get(self, request: Request, contact_id: uuid.UUID) -> Response:
        result = async_to_sync(_tag_service().get_contact_tags)(contact_id)
        return envelope_response(result, TagSerializer, many=True)


class ContactTagView(APIView):
    """Attach or detach one tag."""

    @extend_schema(operation_id="add_contact_tag", summary="Tag contact", tags=["CRM"], request=None, responses={200: None})
    def post(self, request: Request, contact_id: uuid.UUID, tag_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_tag_service().add_tag_to_contact)(contact_id, tag_id))

    @extend_schema(operation_id="remove_contact_tag", summary="Untag contact", tags=["CRM"], responses={200: None})
    def delete(self, request: Request, contact_id: uuid.UUID, tag_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_tag_service().remove_tag_from_contact)(contact_id, tag_id))


# Tags


class TagListView(APIView):
    @extend_schema(operation_id="list_tags", summary="List tags", tags=["CRM"], responses={200: TagSerializer(many=True)})
    def get(self, request: Request) -> Response:
        return envelope_response(async_to_sync(_tag_service().get_tags)(), TagSerializer, many=True)

    @extend_schema(
        operation_id="create_tag",
        summary="Create tag",
        tags=["CRM"],
        request=TagRequestSerializer,
        responses={201: TagSerializer, 400: {"description": "Bad Request"}},
    )
    def post(self, request: Request) -> Response:
        serializer = TagRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = async_to_sync(_tag_service().create_tag)(data["name"], data.get("color"), user_id_of(request))
        return envelope_response(result, TagSerializer, success_status=status.HTTP_201_CREATED)


class TagDetailView(APIView):
    @extend_schema(
        operation_id="update_tag",
        summary="Rename tag",
        tags=["CRM"],
        request=TagRequestSerializer,
        responses={200: TagSerializer, 404: {"description": "Not Found"}},
    )
    def put(self, request: Request, tag_id: uuid.UUID) -> Response:
        serializer = TagRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = async_to_sync(_tag_service().update_tag)(tag_id, data["name"], data.get("color"))
        return envelope_response(result, TagSerializer)

    @extend_schema(operation_id="delete_tag", summary="Delete tag", tags=["CRM"], responses={200: None})
    def delete(self, request: Request, tag_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_tag_service().delete_tag)(tag_id))


class TagContactsView(APIView):
    @extend_schema(
        operation_id="list_tag_contacts",
        summary="Contacts carrying a tag",
        tags=["CRM"],
        responses={200: ContactSerializer(many=True)},
    )
    def get(self, request: Request, tag_id: uuid.UUID) -> Response:
        result = async_to_sync(_tag_service().get_contacts_by_tag)(tag_id)
        return envelope_response(result, ContactSerializer, many=True)


# Opportunities and pipelines


class OpportunityListView(APIView):
    @extend_schema(
        operation_id="list_opportunities",
        summary="List opportunities",
        tags=["CRM"],
        parameters=[OpenApiParameter(name, str) for name in OPPORTUNITY_FILTERS],
        responses={200: OpportunityDetailSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        result = async_to_sync(_opportunity_service().get_opportunities)(
            _query_filters(request, OPPORTUNITY_FILTERS)
        )
        return envelope_response(result, OpportunityDetailSerializer, many=True)

    @extend_schema(
        operation_id="create_opportunity",
        summary="Create opportunity",
        description="Without a stage the deal lands in the first stage of the pipeline.",
        tags=["CRM"],
        request=OpportunityRequestSerializer,
        responses={201: OpportunitySerializer, 400: {"description": "Bad Request"}},
    )
    def post(self, request: Request) -> Response:
        serializer = OpportunityRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_opportunity_service().create_opportunity)(
            serializer.validated_data, user_id_of(request)
        )
        return envelope_response(result, OpportunitySerializer, success_status=status.HTTP_201_CREATED)


class OpportunityMetricsView(APIView):
    @extend_schema(
        operation_id="opportunity_metrics",
        summary="Pipeline metrics of the current user",
        tags=["CRM"],
        responses={200: OpportunityMetricsSerializer},
    )
    def get(self, request: Request) -> Response:
        result = async_to_sync(_opportunity_service().get_opportunity_metrics)(user_id_of(request))
        return envelope_response(result, OpportunityMetricsSerializer)


class OpportunityDetailView(APIView):
    @extend_schema(
        operation_id="get_opportunity",
        summary="Get opportunity",
        tags=["CRM"],
        responses={200: OpportunityDetailSerializer, 404: {"description": "Not Found"}},
    )
    def get(self, request: Request, opportunity_id: uuid.UUID) -> Response:
        result = async_to_sync(_opportunity_service().get_opportunity_by_id)(opportunity_id)
        return envelope_response(result, OpportunityDetailSerializer)

    @extend_schema(
        operation_id="update_opportunity",
        summary="Update opportunity",
        tags=["CRM"],
        request=OpportunityUpdateRequestSerializer,
        responses={200: OpportunitySerializer, 404: {"description": "Not Found"}},
    )
    def put(self, request: Request, opportunity_id: uuid.UUID) -> Response:
        serializer = OpportunityUpdateRequestSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_opportunity_service().update_opportunity)(opportunity_id, serializer.validated_data)
        return envelope_response(result, OpportunitySerializer)

    @extend_schema(operation_id="delete_opportunity", summary="Delete opportunity", tags=["CRM"], responses={200: None})
    def delete(self, request: Request, opportunity_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_opportunity_service().delete_opportunity)(opportunity_id))


class OpportunityStageView(APIView):
    @extend_schema(
        operation_id="move_opportunity",
        summary="Move opportunity to another stage",
        tags=["CRM"],
        request=StageMoveRequestSerializer,
        responses={200: OpportunitySerializer, 404: {"description": "Not Found"}},
    )
    def patch(self, request: Request, opportunity_id: uuid.UUID) -> Response:
        serializer = StageMoveRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_opportunity_service().move_opportunity_to_stage)(
            opportunity_id, serializer.validated_data["stage_id"]
        )
        return envelope_response(result, OpportunitySerializer)


class OpportunityWonView(APIView):
    @extend_schema(
        operation_id="mark_opportunity_won",
        summary="Mark opportunity as won",
        tags=["CRM"],
        request=None,
        responses={200: OpportunitySerializer, 404: {"description": "Not Found"}},
    )
    def post(self, request: Request, opportunity_id: uuid.UUID) -> Response:
        result = async_to_sync(_opportunity_service().mark_opportunity_as_won)(
            opportunity_id, actor=actor_of(request)
        )
        return envelope_response(result, OpportunitySerializer)


class OpportunityLostView(APIView):
    @extend_schema(
        operation_id="mark_opportunity_lost",
        summary="Mark opportunity as lost",
        tags=["CRM"],
        request=LostRequestSerializer,
        responses={200: OpportunitySerializer, 404: {"description": "Not Found"}},
    )
    def post(self, request: Request, opportunity_id: uuid.UUID) -> Response:
        serializer = LostRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_opportunity_service().mark_opportunity_as_lost)(
            opportunity_id, serializer.validated_data.get("reason"), actor=actor_of(request)
        )
        return envelope_response(result, OpportunitySerializer)


class PipelineListView(APIView):
    @extend_schema(
        operation_id="list_pipelines",
        summary="List pipelines",
        tags=["CRM"],
        responses={200: PipelineSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        return envelope_response(async_to_sync(_opportunity_service().get_pipelines)(), PipelineSerializer, many=True)

    @extend_schema(
        operation_id="create_pipeline",
        summary="Create pipeline with stages",
        tags=["CRM"],
        request=PipelineRequestSerializer,
        responses={201: PipelineSerializer, 400: {"description": "Bad Request"}},
    )
    def post(self, request: Request) -> Response:
        serializer = PipelineRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data["stages"] = [dict(stage) for stage in data.get("stages", [])]
        result = async_to_sync(_opportunity_service().create_pipeline)(data, user_id_of(request))
        return envelope_response(result, PipelineSerializer, success_status=status.HTTP_201_CREATED)


class PipelineBoardView(APIView):
    """Kanban board of a pipeline."""

    @extend_schema(
        operation_id="pipeline_board",
        summary="Open opportunities grouped by stage",
        tags=["CRM"],
        responses={200: StageColumnSerializer(many=True), 404: {"description": "Not Found"}},
    )
    def get(self, request: Request, pipeline_id: uuid.UUID) -> Response:
        result = async_to_sync(_opportunity_service().get_opportunities_by_stage)(pipeline_id)
        return envelope_response(result, StageColumnSerializer, many=True)


# Tasks


class TaskListView(APIView):
    @extend_schema(
        operation_id="list_tasks",
        summary="List tasks",
        tags=["CRM"],
        parameters=[OpenApiParameter(name, str) for name in TASK_FILTERS],
        responses={200: TaskDetailSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        result = async_to_sync(_task_service().get_tasks)(_query_filters(request, TASK_FILTERS))
        return envelope_response(result, TaskDetailSerializer, many=True)

    @extend_schema(
        operation_id="create_task",
        summary="Create task",
        tags=["CRM"],
        request=TaskRequestSerializer,
        responses={201: TaskSerializer, 400: {"description": "Bad Request"}},
    )
    def post(self, request: Request) -> Response:
        serializer = TaskRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_task_service().create_task)(serializer.validated_data, user_id_of(request))
        return envelope_response(result, TaskSerializer, success_status=status.HTTP_201_CREATED)


class TaskPendingView(APIView):
    @extend_schema(
        operation_id="list_pending_tasks",
        summary="Pending tasks",
        tags=["CRM"],
        responses={200: TaskDetailSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        return envelope_response(async_to_sync(_task_service().get_pending_tasks)(), TaskDetailSerializer, many=True)


class TaskOverdueView(APIView):
    @extend_schema(
        operation_id="list_overdue_tasks",
        summary="Overdue tasks",
        tags=["CRM"],
        responses={200: TaskDetailSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        return envelope_response(async_to_sync(_task_service().get_overdue_tasks)(), TaskDetailSerializer, many=True)


class TaskTodayView(APIView):
    @extend_schema(
        operation_id="list_today_tasks",
        summary="Tasks due today",
        tags=["CRM"],
        responses={200: TaskDetailSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        return envelope_response(async_to_sync(_task_service().get_today_tasks)(), TaskDetailSerializer, many=True)


class TaskStatsView(APIView):
    @extend_schema(
        operation_id="task_stats",
        summary="Task totals of the current user",
        tags=["CRM"],
        responses={200: TaskStatsSerializer},
    )
    def get(self, request: Request) -> Response:
        return envelope_response(async_to_sync(_task_service().get_task_stats)(user_id_of(request)), TaskStatsSerializer)


class TaskDetailView(APIView):
    @extend_schema(
        operation_id="get_task",
        summary="Get task",
        tags=["CRM"],
        responses={200: TaskDetailSerializer, 404: {"description": "Not Found"}},
    )
    def get(self, request: Request, task_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_task_service().get_task_by_id)(task_id), TaskDetailSerializer)

    @extend_schema(
        operation_id="update_task",
        summary="Update task",
        tags=["CRM"],
        request=TaskUpdateRequestSerializer,
        responses={200: TaskSerializer, 404: {"description": "Not Found"}},
    )
    def put(self, request: Request, task_id: uuid.UUID) -> Response:
        serializer = TaskUpdateRequestSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        result = async_to_sync(_task_service().update_task)(
            task_id, serializer.validated_data, actor=actor_of(request)
        )
        return envelope_response(result, TaskSerializer)

    @extend_schema(operation_id="delete_task", summary="Delete task", tags=["CRM"], responses={200: None})
    def delete(self, request: Request, task_id: uuid.UUID) -> Response:
        return envelope_response(async_to_sync(_task_service().delete_task)(task_id))


class TaskCompleteView(APIView):
    @extend_schema(
        operation_id="complete_task",
        summary="Complete task",
        tags=["CRM"],
        request=None,
        responses={200: TaskSerializer, 404: {"description": "Not Found"}},
    )
    def post(self, request: Request, task_id: uuid.UUID) -> Response:
        result = async_to_sync(_task_service().complete_task)(task_id, actor=actor_of(request))
        return envelope_response(result, TaskSerializer)
