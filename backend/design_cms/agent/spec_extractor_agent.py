from dataclasses import dataclass

from design_cms.agent.artifacts import ExtractedSpec, ThemeContext
from design_cms.agent.base import BaseAgent
from design_cms.agent.llm_client import ImageInput
from design_cms.agent.prompts.extraction import (
    EXTRACTION_SYSTEM_PROMPT,
    build_extraction_prompt,
)
from design_cms.core.config import settings


@dataclass(frozen=True)
class SpecSheet:
    """A spec sheet image plus the theme its colours should be mapped onto."""
    image: ImageInput
    theme: ThemeContext | None = None


class SpecExtractorAgent(BaseAgent[SpecSheet, ExtractedSpec]):
    """
    Agent that reads a spec sheet image with a vision model and returns
    the component's name, category, variant groups and colour mapping.
    """

    def __init__(self, model_name: str | None = None):
        super().__init__(model_name=model_name or settings.vision_model)

    async def run(self, input_data: SpecSheet) -> ExtractedSpec:
        spec = await self.llm.generate_structured(
            system_prompt=EXTRACTION_SYSTEM_PROMPT,
            user_prompt=build_extraction_prompt(input_data.theme),
            response_schema=ExtractedSpec,
            image=input_data.image,
        )
        if not spec.name.strip():
            raise ValueError("SpecExtractorAgent could not identify a component name.")
        return spec
