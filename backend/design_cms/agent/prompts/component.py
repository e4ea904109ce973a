import json

from design_cms.agent.artifacts import ComponentSpec
from design_cms.variants import normalize_variants

COMPONENT_SYSTEM_PROMPT = (
    "You are an expert React developer. Generate clean, type-safe component code "
    "following the exact pattern provided. Return only the component source, no explanations."
)

REQUIRED_IMPORTS = "\n".join(
    [
        'import * as React from "react"',
        'import { Slot } from "@radix-ui/react-slot"',
        'import { cva, type VariantProps } from "class-variance-authority"',
        'import { cn } from "@/lib/utils"',
    ]
)


def _default_variants(spec: ComponentSpec) -> dict[str, str]:
    return {group: options[0] for group, options in normalize_variants(spec.variants).items() if options}


def build_component_prompt(spec: ComponentSpec) -> str:
    variable = f"{spec.name[:1].lower()}{spec.name[1:]}Variants"
    sections = [
        "Generate a React component following the shadcn/ui pattern.",
        "",
        f"Name: {spec.name}",
        f"Description: {spec.description}",
        f"Variants: {json.dumps(spec.variants, indent=2)}",
        f"Props: {json.dumps([p.model_dump() for p in spec.props], indent=2)}",
        f"Default variants: {json.dumps(_default_variants(spec))}",
    ]

    if spec.theme:
        sections += [
            "",
            f"THEME: {spec.theme.name}",
            f"Available color tokens: {', '.join(spec.theme.colors)}",
        ]
        if spec.color_mapping:
            sections.append(f"Color Mapping: {json.dumps(spec.color_mapping, indent=2)}")
        sections += [
            "",
            "Color rules:",
            "- Never use hardcoded colors (no #hex, no rgb()).",
            "- Use Tailwind classes bound to theme tokens: bg-primary, text-foreground, border-border.",
            "- Hover: hover:bg-primary-hover. Active: active:bg-primary-active.",
            "- Disabled: disabled:opacity-50 disabled:cursor-not-allowed.",
            "- Follow the color mapping above.",
        ]

    sections += [
        "",
        "Requirements:",
        "1. Variant group names are lowercase: variant, size, icon, state.",
        "2. Variant values are lowercase: default, primary, secondary, sm, lg.",
        "3. Use Slot from @radix-ui/react-slot and support an asChild prop.",
        f"4. Build class names with cva and export `{variable}` next to `{spec.name}`.",
        f'5. Set `{spec.name}.displayName = "{spec.name}"` and wrap the component in React.forwardRef.',
        "",
        "Required imports:",
        REQUIRED_IMPORTS,
        "",
        "Return ONLY the component code.",
    ]
    return "\n".join(sections)
