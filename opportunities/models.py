from opportunities.infrastructure.models import Opportunity, Pipeline, PipelineStage  # noqa: F401
