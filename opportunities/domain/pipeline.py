"""
Pipeline domain entities.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

DEFAULT_STAGE_COLOR = "#6366f1"


@dataclass(frozen=True)
class PipelineStage:
    """A step of a pipeline; ``probability`` is a percentage."""

    id: uuid.UUID
    pipeline_id: uuid.UUID
    name: str
    color: str
    probability: int
    order_index: int

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Stage name is required")
        if self.probability < 0 or self.probability > 100:
            raise ValueError("Stage probability must be between 0 and 100")
        if self.order_index < 0:
            raise ValueError("Stage order must not be negative")


@dataclass(frozen=True)
class Pipeline:
    """
    Pipeline domain entity.

    ``stages`` are kept sorted by ``order_index``.
    """

    id: uuid.UUID
    name: str
    description: Optional[str]
    user_id: Optional[int]
    created_at: datetime
    stages: Tuple[PipelineStage, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Pipeline name is required")
        ordered = tuple(sorted(self.stages, key=lambda stage: stage.order_index))
        object.__setattr__(self, "stages", ordered)

    @classmethod
    def create(
        cls,
        name: str,
        stages: Sequence[dict] = (),
        description: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> "Pipeline":
        """
        Create a pipeline with its stages.

        Args:
            name: Pipeline name
            stages: Dicts with ``name`` and optional ``color``, ``probability``
                and ``order_index`` (defaults to the position in the list)
            description: Free text
            user_id: Owner of the pipeline

        Returns:
            Pipeline entity instance
        """
        pipeline_id = uuid.uuid4()
        built: List[PipelineStage] = []
        for position, stage in enumerate(stages):
            built.append(
                PipelineStage(
                    id=uuid.uuid4(),
                    pipeline_id=pipeline_id,
                    name=(stage.get("name") or "").strip(),
                    color=stage.get("color") or DEFAULT_STAGE_COLOR,
                    probability=int(stage.get("probability", 0)),
                    order_index=int(stage.get("order_index", position)),
                )
            )
        return cls(
            id=pipeline_id,
            name=(name or "").strip(),
            description=description or None,
            user_id=user_id,
            created_at=datetime.now(timezone.utc),
            stages=tuple(sorted(built, key=lambda stage: stage.order_index)),
        )

    def stage(self, stage_id: uuid.UUID) -> Optional[PipelineStage]:
        return next((stage for stage in self.stages if stage.id == stage_id), None)

    @property
    def first_stage(self) -> Optional[PipelineStage]:
        return self.stages[0] if self.stages else None
