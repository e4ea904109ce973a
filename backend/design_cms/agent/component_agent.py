from design_cms.agent.artifacts import ComponentSpec, GeneratedCode
from design_cms.agent.base import BaseAgent
from design_cms.agent.prompts.component import (
    COMPONENT_SYSTEM_PROMPT,
    build_component_prompt,
)


class ComponentCodeAgent(BaseAgent[ComponentSpec, GeneratedCode]):
    """Agent that writes the component source from a (possibly hand-edited) spec."""

    async def run(self, input_data: ComponentSpec) -> GeneratedCode:
        code = await self.llm.generate_text(
            system_prompt=COMPONENT_SYSTEM_PROMPT,
            user_prompt=build_component_prompt(input_data),
            temperature=0.7,
        )
        return GeneratedCode(code=code)
