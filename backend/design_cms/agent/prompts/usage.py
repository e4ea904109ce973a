import json

from design_cms.agent.artifacts import PromptsRequest

USAGE_SYSTEM_PROMPT = (
    "You are a helpful assistant that writes example prompts people can give an AI "
    "coding assistant to use a design system component. Return valid JSON only."
)


def build_usage_prompt(component: PromptsRequest) -> str:
    return f"""Generate AI usage prompts for this component:

Component: {component.name}
Description: {component.description}
Variants: {json.dumps(component.variants, indent=2)}

Create prompts in three categories:

1. Basic prompts (5-10 simple, single-variant requests), e.g.
   "Give me a {component.name}", "Create a [variant] {component.name}"
2. Advanced prompts (5-10 multi-variant requests), e.g.
   "Create a [variant1] [variant2] {component.name} with [feature]"
3. Use cases (3-5 real-world scenarios with a prompt and the expected JSX output)

Return as JSON:
{{
  "basic": ["..."],
  "advanced": ["..."],
  "useCases": [{{"scenario": "...", "prompt": "...", "output": "..."}}]
}}"""
