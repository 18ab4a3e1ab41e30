"""
Django implementation of PipelineRepository port.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import transaction

from opportunities.domain.pipeline import Pipeline, PipelineStage
from opportunities.infrastructure.models import Pipeline as PipelineModel
from opportunities.infrastructure.models import PipelineStage as StageModel
from opportunities.ports.pipeline_repository import PipelineRepository


class DjangoPipelineRepository(PipelineRepository):
    """
    Django ORM implementation of PipelineRepository.
    """

    def _stage_to_domain(self, model: StageModel) -> PipelineStage:
        return PipelineStage(
            id=model.id,
            pipeline_id=model.pipeline_id,
            name=model.name,
            color=model.color,
            probability=model.probability,
            order_index=model.order_index,
        )

    def _to_domain(self, model: PipelineModel) -> Pipeline:
        return Pipeline(
            id=model.id,
            name=model.name,
            description=model.description,
            user_id=model.user_id,
            created_at=model.created_at,
            stages=tuple(self._stage_to_domain(stage) for stage in model.stages.all()),
        )

    @sync_to_async
    def save(self, pipeline: Pipeline) -> Pipeline:
        """
        Save a pipeline and replace its stage list.

        Stages missing from ``pipeline.stages`` are deleted; their deals keep
        the pipeline and lose the stage.
        """
        with transaction.atomic():
            model, _ = PipelineModel.objects.update_or_create(
                id=pipeline.id,
                defaults={
                    "name": pipeline.name,
                    "description": pipeline.description,
                    "user_id": pipeline.user_id,
                },
            )
            keep = [stage.id for stage in pipeline.stages]
            StageModel.objects.filter(pipeline=model).exclude(id__in=keep).delete()
            for stage in pipeline.stages:
                StageModel.objects.update_or_create(
                    id=stage.id,
                    defaults={
                        "pipeline": model,
                        "name": stage.name,
                        "color": stage.color,
                        "probability": stage.probability,
                        "order_index": stage.order_index,
                    },
                )
        return self._to_domain(PipelineModel.objects.prefetch_related("stages").get(id=model.id))

    @sync_to_async
    def find_by_id(self, pipeline_id: uuid.UUID) -> Optional[Pipeline]:
        try:
            return self._to_domain(PipelineModel.objects.prefetch_related("stages").get(id=pipeline_id))
        except PipelineModel.DoesNotExist:
            return None

    @sync_to_async
    def list_all(self) -> List[Pipeline]:
        models = PipelineModel.objects.prefetch_related("stages").order_by("created_at")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def find_stage(self, stage_id: uuid.UUID) -> Optional[PipelineStage]:
        try:
            return self._stage_to_domain(StageModel.objects.get(id=stage_id))
        except StageModel.DoesNotExist:
            return None
