from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from design_cms.models import COMPONENT_CATEGORIES


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ThemeContext(BaseModel):
    """The subset of a theme the prompts need."""
    name: str
    colors: dict[str, str] = Field(default_factory=dict)
    typography: dict[str, Any] | None = None
    spacing: dict[str, Any] | None = None


class ExtractedSpec(CamelModel):
    """Artifact produced from a spec sheet image."""
    name: str = Field(description="Component name, e.g. Button, Card, Badge")
    description: str = Field(default="", description="What the component does")
    category: str = Field(
        default="other",
        description=f"One of: {', '.join(COMPONENT_CATEGORIES)}",
    )
    variants: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Variant group name -> lowercase option values",
    )
    color_mapping: dict[str, str] = Field(
        default_factory=dict,
        alias="colorMapping",
        description="Colour seen in the spec sheet -> theme token name",
    )
    notes: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: Any) -> str:
        category = str(value or "").strip().lower()
        return category if category in COMPONENT_CATEGORIES else "other"


class PropSpec(BaseModel):
    name: str
    type: str = "string"
    required: bool = False


class ComponentSpec(CamelModel):
    """Input to source generation: an extracted spec, optionally edited, plus theme context."""
    name: str
    description: str = ""
    variants: dict[str, list[str]] = Field(default_factory=dict)
    props: list[PropSpec] = Field(default_factory=list)
    theme: ThemeContext | None = None
    color_mapping: dict[str, str] | None = Field(default=None, alias="colorMapping")


class GeneratedCode(BaseModel):
    code: str


class PromptsRequest(BaseModel):
    name: str
    description: str = ""
    variants: dict[str, list[str]] = Field(default_factory=dict)


class UseCase(BaseModel):
    scenario: str
    prompt: str
    output: str


class ComponentPrompts(CamelModel):
    basic: list[str] = Field(default_factory=list)
    advanced: list[str] = Field(default_factory=list)
    use_cases: list[UseCase] = Field(default_factory=list, alias="useCases")


class DocsRequest(BaseModel):
    name: str
    code: str
    variants: dict[str, list[str]] = Field(default_factory=dict)


class PropDoc(BaseModel):
    name: str
    type: str = ""
    required: bool = False
    description: str = ""
    default: str | None = None

    @field_validator("default", mode="before")
    @classmethod
    def _stringify_default(cls, value: Any) -> str | None:
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)


class ApiDoc(BaseModel):
    props: list[PropDoc] = Field(default_factory=list)


class Installation(CamelModel):
    dependencies: list[str] = Field(default_factory=list)
    setup_steps: list[str] = Field(default_factory=list, alias="setupSteps")


class Example(BaseModel):
    name: str
    code: str


class ComponentDocs(BaseModel):
    api: ApiDoc = Field(default_factory=ApiDoc)
    installation: Installation = Field(default_factory=Installation)
    examples: list[Example] = Field(default_factory=list)
