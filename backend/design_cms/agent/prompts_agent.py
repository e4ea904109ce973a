from design_cms.agent.artifacts import ComponentPrompts, PromptsRequest
from design_cms.agent.base import BaseAgent
from design_cms.agent.prompts.usage import USAGE_SYSTEM_PROMPT, build_usage_prompt


class UsagePromptsAgent(BaseAgent[PromptsRequest, ComponentPrompts]):
    """Agent that writes basic, advanced and use-case prompts for a component."""

    async def run(self, input_data: PromptsRequest) -> ComponentPrompts:
        return await self.llm.generate_structured(
            system_prompt=USAGE_SYSTEM_PROMPT,
            user_prompt=build_usage_prompt(input_data),
            response_schema=ComponentPrompts,
            temperature=0.7,
        )
