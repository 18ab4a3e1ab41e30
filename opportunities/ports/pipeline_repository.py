"""
Pipeline repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from opportunities.domain.pipeline import Pipeline, PipelineStage


class PipelineRepository(ABC):
    """
    Abstract repository for pipelines and their stages.
    """

    @abstractmethod
    async def save(self, pipeline: Pipeline) -> Pipeline:
        """
        Save a pipeline together with its stages.

        Args:
            pipeline: Pipeline entity

        Returns:
            Saved pipeline
        """
        pass

    @abstractmethod
    async def find_by_id(self, pipeline_id: uuid.UUID) -> Optional[Pipeline]:
        pass

    @abstractmethod
    async def list_all(self) -> List[Pipeline]:
        """Every pipeline with its stages, oldest first."""
        pass

    @abstractmethod
    async def find_stage(self, stage_id: uuid.UUID) -> Optional[PipelineStage]:
        pass
