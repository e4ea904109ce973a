import re
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import EmailStr, field_validator
from sqlalchemy import JSON, DateTime, Index, text
from sqlmodel import Field, Relationship, SQLModel

from design_cms.core.policy import EDITOR_ROLE, ROLES

COMPONENT_CATEGORIES = (
    "buttons",
    "inputs",
    "layout",
    "navigation",
    "feedback",
    "data-display",
    "overlays",
    "other",
)


def get_datetime_utc() -> datetime:
    return datetime.now(timezone.utc)


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", (value or "").strip().lower()).strip("-")


# Users

class UserBase(SQLModel):
    email: EmailStr = Field(unique=True, index=True, max_length=255)
    role: str = Field(default=EDITOR_ROLE, max_length=20)
    is_active: bool = True
    full_name: str | None = Field(default=None, max_length=255)

    @field_validator("role")
    @classmethod
    def _known_role(cls, value: str) -> str:
        if value not in ROLES:
            raise ValueError(f"role must be one of: {', '.join(ROLES)}")
        return value


class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=128)


class User(UserBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    hashed_password: str
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    updated_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class UserPublic(UserBase):
    id: uuid.UUID
    created_at: datetime | None = None


# Single-row table holding the shared admin password
class AdminConfig(SQLModel, table=True):
    __tablename__ = "admin_config"

    id: int | None = Field(default=None, primary_key=True)
    password_hash: str
    updated_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


# Generic message
class Message(SQLModel):
    message: str


class LoginRequest(SQLModel):
    password: str | None = None
    email: EmailStr | None = None


class ChangePassword(SQLModel):
    current_password: str = Field(min_length=1, max_length=128)
    new_password: str = Field(min_length=8, max_length=128)


# Themes

class ThemeBase(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    value: str = Field(min_length=1, max_length=100, unique=True, index=True)
    colors: dict[str, str] = Field(default_factory=dict, sa_type=JSON)
    typography: dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    spacing: dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    effects: dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    is_active: bool = False


class ThemeCreate(ThemeBase):
    pass


def _reject_null(value: Any) -> Any:
    # Omitted fields keep their stored value; an explicit null is not a value.
    if value is None:
        raise ValueError("field cannot be null")
    return value


class ThemeUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    value: str | None = Field(default=None, min_length=1, max_length=100)
    colors: dict[str, str] | None = None
    typography: dict[str, Any] | None = None
    spacing: dict[str, Any] | None = None
    effects: dict[str, Any] | None = None
    is_active: bool | None = None

    _not_null = field_validator("*", mode="before")(_reject_null)


class Theme(ThemeBase, table=True):
    __tablename__ = "themes"
    # At most one active row; a second activation fails at commit instead of
    # leaving two active themes behind.
    __table_args__ = (
        Index(
            "uq_themes_single_active",
            "is_active",
            unique=True,
            sqlite_where=text("is_active"),
            postgresql_where=text("is_active"),
        ),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    updated_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class ThemePublic(ThemeBase):
    id: uuid.UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ThemesPublic(SQLModel):
    themes: list[ThemePublic]
    count: int


# Components

class ComponentBase(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=255, unique=True, index=True)
    description: str = Field(default="")
    category: str = Field(default="other", max_length=50, index=True)
    code: str = Field(default="")
    props: list[dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    variants: dict[str, list[str]] = Field(default_factory=dict, sa_type=JSON)
    prompts: dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    examples: list[dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    installation: dict[str, Any] = Field(default_factory=dict, sa_type=JSON)

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        if value not in COMPONENT_CATEGORIES:
            raise ValueError(
                f"category must be one of: {', '.join(COMPONENT_CATEGORIES)}"
            )
        return value


class ComponentCreate(ComponentBase):
    slug: str | None = Field(default=None, max_length=255)  # type: ignore

    def resolved_slug(self) -> str:
        return self.slug or slugify(self.name)


class ComponentUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = None
    code: str | None = None
    props: list[dict[str, Any]] | None = None
    variants: dict[str, list[str]] | None = None
    prompts: dict[str, Any] | None = None
    examples: list[dict[str, Any]] | None = None
    installation: dict[str, Any] | None = None

    _not_null = field_validator("*", mode="before")(_reject_null)

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str | None) -> str | None:
        if value is not None and value not in COMPONENT_CATEGORIES:
            raise ValueError(
                f"category must be one of: {', '.join(COMPONENT_CATEGORIES)}"
            )
        return value


class Component(ComponentBase, table=True):
    __tablename__ = "components"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    updated_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )


class ComponentPublic(ComponentBase):
    id: uuid.UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ComponentsPublic(SQLModel):
    components: list[ComponentPublic]
    count: int


class SearchResults(SQLModel):
    results: list[ComponentPublic]
    count: int
    query: str


class DashboardStats(SQLModel):
    themes: int
    components: int
    active_theme: str | None = None


# AI pipeline runs

class GenerationRunBase(SQLModel):
    status: str = Field(default="pending")  # pending, running, completed, failed
    image_filename: str | None = Field(default=None, max_length=255)
    theme_value: str | None = Field(default=None, max_length=100)
    requested_by: str = Field(max_length=255)
    error: str | None = Field(default=None)


class GenerationRunCreate(GenerationRunBase):
    pass


class GenerationRun(GenerationRunBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    component_id: uuid.UUID | None = Field(default=None)
    artifacts: list["ArtifactRecord"] = Relationship(back_populates="run", cascade_delete=True)


class GenerationRunPublic(GenerationRunBase):
    id: uuid.UUID
    component_id: uuid.UUID | None = None
    created_at: datetime | None = None


class ArtifactRecordBase(SQLModel):
    stage: str = Field(max_length=100)  # extract, code, prompts, docs
    content: dict = Field(default_factory=dict, sa_type=JSON)


class ArtifactRecordCreate(ArtifactRecordBase):
    run_id: uuid.UUID


class ArtifactRecord(ArtifactRecordBase, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime | None = Field(
        default_factory=get_datetime_utc,
        sa_type=DateTime(timezone=True),  # type: ignore
    )
    run_id: uuid.UUID = Field(
        foreign_key="generationrun.id", nullable=False, ondelete="CASCADE"
    )
    run: GenerationRun | None = Relationship(back_populates="artifacts")


class ArtifactRecordPublic(ArtifactRecordBase):
    id: uuid.UUID
    run_id: uuid.UUID
    created_at: datetime | None = None


class GenerationRunWithArtifacts(GenerationRunPublic):
    artifacts: list[ArtifactRecordPublic]
