"""Starter content for a fresh database, and bulk import of theme and component JSON files."""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ValidationError
from sqlmodel import Session

from design_cms import crud
from design_cms.exceptions import DuplicateRecordError
from design_cms.models import ComponentCreate, ThemeCreate

logger = logging.getLogger(__name__)

BASE_TYPOGRAPHY = {
    "fontFamily": "Inter, system-ui, sans-serif",
    "fontSize": {"sm": "0.875rem", "base": "1rem", "lg": "1.125rem"},
    "fontWeight": {"normal": "400", "medium": "500", "bold": "700"},
}

BASE_SPACING = {"xs": "0.25rem", "sm": "0.5rem", "md": "1rem", "lg": "1.5rem", "xl": "2rem"}

SEED_THEMES = [
    ThemeCreate(
        name="Light",
        value="light",
        is_active=True,
        colors={
            "primary": "#2563eb",
            "secondary": "#64748b",
            "background": "#ffffff",
            "foreground": "#0f172a",
            "muted": "#f1f5f9",
            "border": "#e2e8f0",
            "destructive": "#dc2626",
        },
        typography=BASE_TYPOGRAPHY,
        spacing=BASE_SPACING,
        effects={"radius": "0.5rem", "shadow": "0 1px 2px rgb(0 0 0 / 0.05)"},
    ),
    ThemeCreate(
        name="Dark",
        value="dark",
        colors={
            "primary": "#3b82f6",
            "secondary": "#94a3b8",
            "background": "#0f172a",
            "foreground": "#f8fafc",
            "muted": "#1e293b",
            "border": "#334155",
            "destructive": "#ef4444",
        },
        typography=BASE_TYPOGRAPHY,
        spacing=BASE_SPACING,
        effects={"radius": "0.5rem", "shadow": "none"},
    ),
]

BUTTON_CODE = """import * as React from "react"
import { cva, type VariantProps } from "class-variance-authority"
import { cn } from "@/lib/utils"

const buttonVariants = cva(
  "inline-flex items-center justify-center rounded-md text-sm font-medium transition-colors",
  {
    variants: {
      variant: {
        primary: "bg-primary text-primary-foreground hover:bg-primary/90",
        secondary: "bg-secondary text-secondary-foreground hover:bg-secondary/80",
        outline: "border border-input bg-background hover:bg-accent",
      },
      size: {
        sm: "h-9 px-3",
        default: "h-10 px-4 py-2",
        lg: "h-11 px-8",
      },
    },
    defaultVariants: { variant: "primary", size: "default" },
  }
)

export interface ButtonProps
  extends React.ButtonHTMLAttributes<HTMLButtonElement>,
    VariantProps<typeof buttonVariants> {}

const Button = React.forwardRef<HTMLButtonElement, ButtonProps>(
  ({ className, variant, size, ...props }, ref) => (
    <button className={cn(buttonVariants({ variant, size, className }))} ref={ref} {...props} />
  )
)
Button.displayName = "Button"

export { Button, buttonVariants }
"""

# Stored with the legacy PascalCase variant names; `normalize-variants` rewrites them.
SEED_COMPONENTS = [
    ComponentCreate(
        name="Button",
        description="Clickable button with visual style and size variants.",
        category="buttons",
        code=BUTTON_CODE,
        props=[
            {"name": "variant", "type": "string", "required": False, "default": "primary",
             "description": "Visual style"},
            {"name": "size", "type": "string", "required": False, "default": "default",
             "description": "Button size"},
            {"name": "disabled", "type": "boolean", "required": False, "default": "false",
             "description": "Disables interaction"},
        ],
        variants={"Type": ["Primary", "Secondary", "Outline"], "Size": ["Small", "Base", "Large"]},
        prompts={
            "basic": ["Add a primary button labelled Save"],
            "advanced": ["Render a small outline button that opens a confirmation dialog"],
            "useCases": [
                {
                    "scenario": "Form submit",
                    "prompt": "Create a submit button for the signup form",
                    "output": '<Button type="submit">Sign up</Button>',
                }
            ],
        },
        examples=[
            {"name": "Primary", "code": "<Button>Save</Button>"},
            {"name": "Outline small", "code": '<Button variant="outline" size="sm">Cancel</Button>'},
        ],
        installation={
            "dependencies": ["class-variance-authority", "clsx", "tailwind-merge"],
            "setupSteps": ["Copy the component into components/ui/button.tsx"],
        },
    ),
]


def seed_database(session: Session) -> dict[str, int]:
    """Insert any seed themes and components that are missing; existing rows are left alone."""
    created = {"themes": 0, "components": 0}
    for theme_in in SEED_THEMES:
        if crud.get_theme_by_value(session=session, value=theme_in.value) is None:
            # Never steal the active flag from a theme the admin already activated.
            if theme_in.is_active and crud.get_active_theme(session=session) is not None:
                theme_in = theme_in.model_copy(update={"is_active": False})
            crud.create_theme(session=session, theme_in=theme_in)
            created["themes"] += 1
    for component_in in SEED_COMPONENTS:
        if crud.get_component_by_slug(session=session, slug=component_in.resolved_slug()) is None:
            crud.create_component(session=session, component_in=component_in)
            created["components"] += 1
    logger.info("Seeded %d themes and %d components", created["themes"], created["components"])
    return created


@dataclass
class ImportReport:
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


def _read_json_files(
    directory: Path, model: type[BaseModel], report: ImportReport
) -> list[tuple[str, BaseModel]]:
    if not directory.is_dir():
        logger.warning("Import directory %s does not exist, skipping", directory)
        return []
    parsed = []
    for path in sorted(directory.glob("*.json")):
        try:
            content = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(content, dict):
                raise ValueError("expected a JSON object")
            # Missing and null fields take the model defaults.
            fields = {key: value for key, value in content.items() if value is not None}
            parsed.append((path.name, model.model_validate(fields)))
        except (ValueError, ValidationError) as e:
            logger.warning("Could not import %s: %s", path, e)
            report.failed[path.name] = str(e)
    return parsed


def import_themes(session: Session, directory: Path) -> ImportReport:
    """Create a theme for each `*.json` file in `directory`; existing values are skipped."""
    report = ImportReport()
    for filename, theme_in in _read_json_files(directory, ThemeCreate, report):
        try:
            theme = crud.create_theme(session=session, theme_in=theme_in)
        except DuplicateRecordError as e:
            logger.warning("Skipping %s: %s", filename, e)
            report.skipped.append(filename)
            continue
        report.created.append(theme.value)
    logger.info("Imported %d themes from %s", len(report.created), directory)
    return report


def import_components(session: Session, directory: Path) -> ImportReport:
    """Create a component for each `*.json` file in `directory`; existing slugs are skipped."""
    report = ImportReport()
    for filename, component_in in _read_json_files(directory, ComponentCreate, report):
        try:
            component = crud.create_component(session=session, component_in=component_in)
        except DuplicateRecordError as e:
            logger.warning("Skipping %s: %s", filename, e)
            report.skipped.append(filename)
            continue
        except ValueError as e:
            report.failed[filename] = str(e)
            continue
        report.created.append(component.slug)
    logger.info("Imported %d components from %s", len(report.created), directory)
    return report
