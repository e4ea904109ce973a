import logging

from sqlmodel import Session, SQLModel, create_engine, select

from design_cms import crud
from design_cms.core.config import settings
from design_cms.core.policy import ADMIN_ROLE
from design_cms.models import User, UserCreate

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    **_engine_kwargs(settings.SQLALCHEMY_DATABASE_URI),
)


def create_db_and_tables() -> None:
    # Tables are created from the SQLModel metadata; there is no migration layer.
    SQLModel.metadata.create_all(engine)


def init_db(session: Session) -> None:
    """Make sure an admin password and, if configured, a first admin user exist."""
    if crud.get_admin_config(session=session) is None:
        crud.set_admin_password(session=session, password=settings.ADMIN_PASSWORD)
        logger.info("Initialised admin password from ADMIN_PASSWORD")

    if settings.FIRST_SUPERUSER and settings.FIRST_SUPERUSER_PASSWORD:
        user = session.exec(
            select(User).where(User.email == settings.FIRST_SUPERUSER)
        ).first()
        if not user:
            user_in = UserCreate(
                email=settings.FIRST_SUPERUSER,
                password=settings.FIRST_SUPERUSER_PASSWORD,
                role=ADMIN_ROLE,
            )
            crud.create_user(session=session, user_create=user_in)
            logger.info("Created first admin user %s", settings.FIRST_SUPERUSER)
