import logging
import uuid
from typing import Any

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from design_cms.core.security import get_password_hash, verify_password
from design_cms.exceptions import (
    ActiveThemeDeletionError,
    DuplicateRecordError,
    RecordNotFoundError,
    ThemeActivationConflict,
)
from design_cms.models import (
    AdminConfig,
    ArtifactRecord,
    ArtifactRecordCreate,
    Component,
    ComponentCreate,
    ComponentUpdate,
    DashboardStats,
    GenerationRun,
    GenerationRunCreate,
    Theme,
    ThemeCreate,
    ThemeUpdate,
    User,
    UserCreate,
    get_datetime_utc,
)

logger = logging.getLogger(__name__)

DEFAULT_COMPONENT_LIMIT = 100
DEFAULT_SEARCH_LIMIT = 50


# Users

def create_user(*, session: Session, user_create: UserCreate) -> User:
    if get_user_by_email(session=session, email=user_create.email):
        raise DuplicateRecordError("A user with this email already exists")
    db_obj = User.model_validate(
        user_create, update={"hashed_password": get_password_hash(user_create.password)}
    )
    session.add(db_obj)
    session.commit()
    session.refresh(db_obj)
    return db_obj


def get_user_by_email(*, session: Session, email: str) -> User | None:
    statement = select(User).where(User.email == email)
    session_user = session.exec(statement).first()
    return session_user


# Dummy hash to use for timing attack prevention when user is not found
# This is an Argon2 hash of a random password, used to ensure constant-time comparison
DUMMY_HASH = "$argon2id$v=19$m=65536,t=3,p=4$MjQyZWE1MzBjYjJlZTI0Yw$YTU4NGM5ZTZmYjE2NzZlZjY0ZWY3ZGRkY2U2OWFjNjk"


def authenticate(*, session: Session, email: str, password: str) -> User | None:
    db_user = get_user_by_email(session=session, email=email)
    if not db_user:
        # Keep the response time close to the existing-user path
        verify_password(password, DUMMY_HASH)
        return None
    verified, updated_password_hash = verify_password(password, db_user.hashed_password)
    if not verified:
        return None
    if updated_password_hash:
        db_user.hashed_password = updated_password_hash
        session.add(db_user)
        session.commit()
        session.refresh(db_user)
    return db_user


# Admin password

def get_admin_config(*, session: Session) -> AdminConfig | None:
    return session.exec(select(AdminConfig).order_by(col(AdminConfig.id))).first()


def set_admin_password(*, session: Session, password: str) -> AdminConfig:
    config = get_admin_config(session=session)
    password_hash = get_password_hash(password)
    if config is None:
        config = AdminConfig(password_hash=password_hash)
    else:
        config.password_hash = password_hash
        config.updated_at = get_datetime_utc()
    session.add(config)
    session.commit()
    session.refresh(config)
    return config


def verify_admin_password(*, session: Session, password: str) -> bool:
    config = get_admin_config(session=session)
    if config is None:
        logger.error("No admin_config row found; run `design-cms seed` first")
        verify_password(password, DUMMY_HASH)
        return False
    verified, updated_password_hash = verify_password(password, config.password_hash)
    if verified and updated_password_hash:
        config.password_hash = updated_password_hash
        session.add(config)
        session.commit()
    return verified


# Themes

def list_themes(*, session: Session, order_by: str = "name") -> list[Theme]:
    order = col(Theme.name) if order_by == "name" else col(Theme.created_at)
    return list(session.exec(select(Theme).order_by(order)).all())


def get_theme(*, session: Session, theme_id: uuid.UUID) -> Theme | None:
    return session.get(Theme, theme_id)


def get_theme_by_value(*, session: Session, value: str) -> Theme | None:
    return session.exec(select(Theme).where(Theme.value == value)).first()


def get_active_theme(*, session: Session) -> Theme | None:
    return session.exec(select(Theme).where(Theme.is_active == True)).first()  # noqa: E712


def _deactivate_other_themes(session: Session, keep_id: uuid.UUID | None) -> None:
    statement = select(Theme).where(Theme.is_active == True)  # noqa: E712
    if keep_id is not None:
        statement = statement.where(Theme.id != keep_id)
    for other in session.exec(statement).all():
        other.is_active = False
        other.updated_at = get_datetime_utc()
        session.add(other)
    # Deactivations must reach the database before the activation does.
    session.flush()


def _commit_theme(session: Session, theme: Theme, *, activating: bool) -> Theme:
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        if activating:
            raise ThemeActivationConflict(
                "Another theme was activated at the same time; retry the activation"
            ) from exc
        raise DuplicateRecordError(f"A theme with value '{theme.value}' already exists") from exc
    session.refresh(theme)
    return theme


def create_theme(*, session: Session, theme_in: ThemeCreate) -> Theme:
    if get_theme_by_value(session=session, value=theme_in.value):
        raise DuplicateRecordError(f"A theme with value '{theme_in.value}' already exists")
    db_theme = Theme.model_validate(theme_in)
    if db_theme.is_active:
        _deactivate_other_themes(session, keep_id=None)
    session.add(db_theme)
    return _commit_theme(session, db_theme, activating=db_theme.is_active)


def update_theme(*, session: Session, db_theme: Theme, theme_in: ThemeUpdate) -> Theme:
    theme_data = theme_in.model_dump(exclude_unset=True)
    new_value = theme_data.get("value")
    if new_value and new_value != db_theme.value:
        if get_theme_by_value(session=session, value=new_value):
            raise DuplicateRecordError(f"A theme with value '{new_value}' already exists")
    activating = bool(theme_data.get("is_active")) and not db_theme.is_active
    if activating:
        # Flush the deactivations first, then apply the activation below.
        theme_data.pop("is_active")
        _deactivate_other_themes(session, keep_id=db_theme.id)
        db_theme.is_active = True
    db_theme.sqlmodel_update(theme_data, update={"updated_at": get_datetime_utc()})
    session.add(db_theme)
    return _commit_theme(session, db_theme, activating=activating)


def set_active_theme(*, session: Session, theme_id: uuid.UUID) -> Theme:
    """Make `theme_id` the only active theme in one transaction."""
    db_theme = session.get(Theme, theme_id)
    if db_theme is None:
        raise RecordNotFoundError("Theme not found")
    _deactivate_other_themes(session, keep_id=theme_id)
    db_theme.is_active = True
    db_theme.updated_at = get_datetime_utc()
    session.add(db_theme)
    return _commit_theme(session, db_theme, activating=True)


def delete_theme(*, session: Session, theme_id: uuid.UUID) -> None:
    db_theme = session.get(Theme, theme_id)
    if db_theme is None:
        raise RecordNotFoundError("Theme not found")
    if db_theme.is_active:
        raise ActiveThemeDeletionError("Cannot delete active theme")
    session.delete(db_theme)
    session.commit()


# Components

def list_components(
    *,
    session: Session,
    category: str | None = None,
    limit: int = DEFAULT_COMPONENT_LIMIT,
) -> list[Component]:
    statement = select(Component).order_by(col(Component.name)).limit(limit)
    if category:
        statement = statement.where(Component.category == category)
    return list(session.exec(statement).all())


def list_recent_components(*, session: Session, limit: int | None = None) -> list[Component]:
    statement = select(Component).order_by(col(Component.created_at).desc())
    if limit is not None:
        statement = statement.limit(limit)
    return list(session.exec(statement).all())


def search_components(
    *,
    session: Session,
    query: str,
    category: str | None = None,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[Component]:
    """Case-insensitive substring match over name, description and category."""
    statement = (
        select(Component)
        .where(
            or_(
                col(Component.name).icontains(query, autoescape=True),
                col(Component.description).icontains(query, autoescape=True),
                col(Component.category).icontains(query, autoescape=True),
            )
        )
        .order_by(col(Component.name))
        .limit(limit)
    )
    if category:
        statement = statement.where(Component.category == category)
    return list(session.exec(statement).all())


def get_component(*, session: Session, component_id: uuid.UUID) -> Component | None:
    return session.get(Component, component_id)


def get_component_by_slug(*, session: Session, slug: str) -> Component | None:
    return session.exec(select(Component).where(Component.slug == slug)).first()


def create_component(*, session: Session, component_in: ComponentCreate) -> Component:
    slug = component_in.resolved_slug()
    if not slug:
        raise ValueError("Component slug could not be derived from its name")
    if get_component_by_slug(session=session, slug=slug):
        raise DuplicateRecordError(f"A component with slug '{slug}' already exists")
    db_component = Component.model_validate(component_in, update={"slug": slug})
    session.add(db_component)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateRecordError(f"A component with slug '{slug}' already exists") from exc
    session.refresh(db_component)
    return db_component


def update_component(
    *, session: Session, db_component: Component, component_in: ComponentUpdate
) -> Component:
    component_data = component_in.model_dump(exclude_unset=True)
    new_slug = component_data.get("slug")
    if new_slug and new_slug != db_component.slug:
        if get_component_by_slug(session=session, slug=new_slug):
            raise DuplicateRecordError(f"A component with slug '{new_slug}' already exists")
    db_component.sqlmodel_update(component_data, update={"updated_at": get_datetime_utc()})
    session.add(db_component)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateRecordError(
            f"A component with slug '{db_component.slug}' already exists"
        ) from exc
    session.refresh(db_component)
    return db_component


def delete_component(*, session: Session, component_id: uuid.UUID) -> None:
    db_component = session.get(Component, component_id)
    if db_component is None:
        raise RecordNotFoundError("Component not found")
    session.delete(db_component)
    session.commit()


def get_dashboard_stats(*, session: Session) -> DashboardStats:
    themes = session.exec(select(func.count()).select_from(Theme)).one()
    components = session.exec(select(func.count()).select_from(Component)).one()
    active = get_active_theme(session=session)
    return DashboardStats(
        themes=themes,
        components=components,
        active_theme=active.name if active else None,
    )


# Generation runs

def create_generation_run(*, session: Session, run_in: GenerationRunCreate) -> GenerationRun:
    db_run = GenerationRun.model_validate(run_in)
    session.add(db_run)
    session.commit()
    session.refresh(db_run)
    return db_run


def update_generation_run_status(
    *,
    session: Session,
    run_id: uuid.UUID,
    status: str,
    **fields: Any,
) -> GenerationRun | None:
    db_run = session.get(GenerationRun, run_id)
    if db_run:
        db_run.status = status
        db_run.sqlmodel_update(fields)
        session.add(db_run)
        session.commit()
        session.refresh(db_run)
    return db_run


def create_artifact_record(*, session: Session, artifact_in: ArtifactRecordCreate) -> ArtifactRecord:
    db_artifact = ArtifactRecord.model_validate(artifact_in)
    session.add(db_artifact)
    session.commit()
    session.refresh(db_artifact)
    return db_artifact
