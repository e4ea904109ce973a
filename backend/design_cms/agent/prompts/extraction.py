import json

from design_cms.agent.artifacts import ThemeContext
from design_cms.models import COMPONENT_CATEGORIES

EXTRACTION_SYSTEM_PROMPT = """
You are the **Spec Extraction Agent** for a design system CMS, an expert UI engineer who reads
component specification images and turns them into shadcn/ui style metadata.

Return ONLY one JSON object with these keys:
- "name": component name (e.g. "Button", "Card", "Badge")
- "description": what the component does
- "category": one of {categories}; use "other" when unclear
- "variants": object mapping a variant group to its option values
- "colorMapping": object mapping a colour you see in the spec sheet to a theme token name
- "notes": any extra requirements, text, measurements or specs you can see

Rules:
1. Extract every visible variant group and its options.
2. Group names MUST be lowercase: variant, size, icon, state (NOT Type, Size, Icon, State).
3. Option values MUST be lowercase: default, primary, secondary, sm, lg (NOT Default, Small, Large).
4. Common groups: variant (default, secondary, ghost, outline, destructive, link),
   size (default, sm, lg, xl, icon), state (enabled, hover, disabled, focused, pressed).
5. Sizes you see become a "size" group; interaction states become a "state" group.

Example:
{{
  "name": "Button",
  "description": "A clickable button component",
  "category": "buttons",
  "variants": {{"variant": ["default", "secondary", "ghost", "outline"], "size": ["default", "sm", "lg"]}},
  "colorMapping": {{"Primary": "primary", "Secondary": "secondary"}}
}}
""".format(categories=", ".join(COMPONENT_CATEGORIES))


def build_extraction_prompt(theme: ThemeContext | None) -> str:
    lines = ["Analyze this component specification image and extract its metadata as JSON."]
    if theme is None:
        return "\n".join(lines)

    tokens = ", ".join(f"{key}: {value}" for key, value in theme.colors.items())
    lines += [
        "",
        f"THEME CONTEXT ({theme.name}):",
        f"Available color tokens: {tokens}",
    ]
    if theme.typography:
        lines.append(f"Typography: {json.dumps(theme.typography, indent=2)}")
    if theme.spacing:
        lines.append(f"Spacing: {json.dumps(theme.spacing, indent=2)}")
    lines += [
        "",
        "Map every colour in the spec sheet to the closest theme token by comparing hex/RGB values,",
        'and return the result in "colorMapping", e.g. {"Primary Button": "primary", "Text Color": "foreground"}.',
        "The generated component will use CSS variables such as var(--primary) instead of hardcoded colours.",
    ]
    return "\n".join(lines)
