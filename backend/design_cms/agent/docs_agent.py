from design_cms.agent.artifacts import ComponentDocs, DocsRequest
from design_cms.agent.base import BaseAgent
from design_cms.agent.prompts.docs import DOCS_SYSTEM_PROMPT, build_docs_prompt


class DocsAgent(BaseAgent[DocsRequest, ComponentDocs]):
    """
    Agent that documents generated code: props table, installation
    dependencies and setup steps, and usage examples.
    """

    async def run(self, input_data: DocsRequest) -> ComponentDocs:
        if not input_data.code.strip():
            raise ValueError("DocsAgent needs component code to document.")
        return await self.llm.generate_structured(
            system_prompt=DOCS_SYSTEM_PROMPT,
            user_prompt=build_docs_prompt(input_data),
            response_schema=ComponentDocs,
            temperature=0.5,
        )
