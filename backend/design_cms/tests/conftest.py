from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from design_cms import crud
from design_cms.api.deps import get_db
from design_cms.main import create_app
from design_cms.models import ComponentCreate, ThemeCreate, UserCreate

ADMIN_PASSWORD = "test-admin-password"
EDITOR_EMAIL = "editor@example.com"
EDITOR_PASSWORD = "editor-password"


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def session(engine) -> Generator[Session, None, None]:
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture
def client(engine, session) -> Generator[TestClient, None, None]:
    crud.set_admin_password(session=session, password=ADMIN_PASSWORD)

    def override_get_db() -> Session:
        return session

    app = create_app(with_lifespan=False)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def editor(session):
    return crud.create_user(
        session=session,
        user_create=UserCreate(email=EDITOR_EMAIL, password=EDITOR_PASSWORD, role="editor"),
    )


@pytest.fixture
def admin_client(client) -> TestClient:
    response = client.post("/api/auth/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def editor_client(client, editor) -> TestClient:
    response = client.post(
        "/api/auth/login", json={"email": EDITOR_EMAIL, "password": EDITOR_PASSWORD}
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def themes(session):
    light = crud.create_theme(
        session=session,
        theme_in=ThemeCreate(
            name="Light", value="light", is_active=True, colors={"primary": "#2563eb"}
        ),
    )
    dark = crud.create_theme(
        session=session,
        theme_in=ThemeCreate(name="Dark", value="dark", colors={"primary": "#3b82f6"}),
    )
    return light, dark


@pytest.fixture
def components(session):
    button = crud.create_component(
        session=session,
        component_in=ComponentCreate(
            name="Button",
            description="Clickable action",
            category="buttons",
            code="export function Button() {}",
            variants={"Type": ["Primary", "Secondary"], "Size": ["Small", "Large"]},
        ),
    )
    text_input = crud.create_component(
        session=session,
        component_in=ComponentCreate(
            name="Text Input",
            description="Single line text field",
            category="inputs",
            code="export function TextInput() {}",
        ),
    )
    return button, text_input
