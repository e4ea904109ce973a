import json

from design_cms.agent.artifacts import DocsRequest

DOCS_SYSTEM_PROMPT = (
    "You are a technical writer that generates component documentation. Return valid JSON only."
)


def build_docs_prompt(component: DocsRequest) -> str:
    return f"""Generate documentation for this component:

Component Name: {component.name}
Variants: {json.dumps(component.variants, indent=2)}

Code:
{component.code}

Generate:
1. API documentation (props extracted from the code)
2. Installation steps
3. Usage examples (basic + each variant)

Return as JSON:
{{
  "api": {{"props": [{{"name": "...", "type": "...", "required": false, "description": "...", "default": "..."}}]}},
  "installation": {{"dependencies": ["class-variance-authority", "clsx", "tailwind-merge"], "setupSteps": ["..."]}},
  "examples": [{{"name": "...", "code": "..."}}]
}}"""
