from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from design_cms.agent.llm_client import LLMClient
from design_cms.core.config import settings

InType = TypeVar("InType")
OutType = TypeVar("OutType", bound=BaseModel)


class BaseAgent(ABC, Generic[InType, OutType]):
    """Abstract base class for every stage of the generation pipeline."""

    def __init__(self, model_name: str | None = None):
        model_to_use = model_name or settings.MODEL_DEFAULT
        self.llm = LLMClient(model_name=model_to_use)

    @abstractmethod
    async def run(self, input_data: InType) -> OutType:
        """Run the agent on the given input to produce the output artifact."""
        pass
