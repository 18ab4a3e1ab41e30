"""
URL configuration for contact, tag, opportunity, pipeline and task endpoints.
"""

from django.urls import path

from api.crm import views

urlpatterns = [
    # Contacts
    path("contacts", views.ContactListView.as_view(), name="contacts"),
    path("contacts/search", views.ContactSearchView.as_view(), name="contact-search"),
    path("contacts/with-tags", views.ContactsWithTagsView.as_view(), name="contacts-with-tags"),
    path("contacts/import", views.ContactImportView.as_view(), name="contact-import"),
    path("contacts/stats", views.ContactStatsView.as_view(), name="contact-stats"),
    path("contacts/<uuid:contact_id>", views.ContactDetailView.as_view(), name="contact-detail"),
    path("contacts/<uuid:contact_id>/score", views.ContactScoreView.as_view(), name="contact-score"),
    path(
        "contacts/<uuid:contact_id>/interactions",
        views.ContactInteractionsView.as_view(),
        name="contact-interactions",
    ),
    path(
        "contacts/<uuid:contact_id>/opportunities",
        views.ContactOpportunitiesView.as_view(),
        name="contact-opportunities",
    ),
    path("contacts/<uuid:contact_id>/tasks", views.ContactTasksView.as_view(), name="contact-tasks"),
    path("contacts/<uuid:contact_id>/tags", views.ContactTagsView.as_view(), name="contact-tags"),
    path(
        "contacts/<uuid:contact_id>/tags/<uuid:tag_id>",
        views.ContactTagView.as_view(),
        name="contact-tag",
    ),
    # Tags
    path("tags", views.TagListView.as_view(), name="tags"),
    path("tags/<uuid:tag_id>", views.TagDetailView.as_view(), name="tag-detail"),
    path("tags/<uuid:tag_id>/contacts", views.TagContactsView.as_view(), name="tag-contacts"),
    # Opportunities
    path("opportunities", views.OpportunityListView.as_view(), name="opportunities"),
    path("opportunities/metrics", views.OpportunityMetricsView.as_view(), name="opportunity-metrics"),
    path(
        "opportunities/<uuid:opportunity_id>",
        views.OpportunityDetailView.as_view(),
        name="opportunity-detail",
    ),
    path(
        "opportunities/<uuid:opportunity_id>/stage",
        views.OpportunityStageView.as_view(),
        name="opportunity-stage",
    ),
    path(
        "opportunities/<uuid:opportunity_id>/won",
        views.OpportunityWonView.as_view(),
        name="opportunity-won",
    ),
    path(
        "opportunities/<uuid:opportunity_id>/lost",
        views.OpportunityLostView.as_view(),
        name="opportunity-lost",
    ),
    # Pipelines
    path("pipelines", views.PipelineListView.as_view(), name="pipelines"),
    path("pipelines/<uuid:pipeline_id>/board", views.PipelineBoardView.as_view(), name="pipeline-board"),
    # Tasks
    path("tasks", views.TaskListView.as_view(), name="tasks"),
    path("tasks/pending", views.TaskPendingView.as_view(), name="tasks-pending"),
    path("tasks/overdue", views.TaskOverdueView.as_view(), name="tasks-overdue"),
    path("tasks/today", views.TaskTodayView.as_view(), name="tasks-today"),
    path("tasks/stats", views.TaskStatsView.as_view(), name="task-stats"),
    path("tasks/<uuid:task_id>", views.TaskDetailView.as_view(), name="task-detail"),
    path("tasks/<uuid:task_id>/complete", views.TaskCompleteView.as_view(), name="task-complete"),
]
