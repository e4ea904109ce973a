import json
from unittest.mock import patch

import pytest
from sqlmodel import Session
from typer.testing import CliRunner

from design_cms import crud
from design_cms.cli import app
from design_cms.models import ThemeCreate
from design_cms.seed import seed_database

runner = CliRunner()


@pytest.fixture
def cli_engine(engine):
    with patch("design_cms.cli.engine", engine), patch("design_cms.cli._prepare_database"):
        yield engine


def test_seed_is_idempotent(cli_engine):
    first = runner.invoke(app, ["seed"])
    second = runner.invoke(app, ["seed"])

    assert first.exit_code == 0
    assert "Seeded 2 theme(s) and 1 component(s)" in first.output
    assert "Seeded 0 theme(s) and 0 component(s)" in second.output
    with Session(cli_engine) as session:
        assert crud.get_active_theme(session=session).value == "light"


def test_seed_keeps_existing_active_theme(session):
    crud.create_theme(
        session=session,
        theme_in=ThemeCreate(name="Brand", value="brand", is_active=True),
    )

    seed_database(session)

    assert crud.get_active_theme(session=session).value == "brand"


def test_normalize_variants_dry_run_changes_nothing(cli_engine, components):
    result = runner.invoke(app, ["normalize-variants"])

    assert result.exit_code == 0
    assert "Would update 1 component(s)" in result.output
    with Session(cli_engine) as session:
        button = crud.get_component_by_slug(session=session, slug="button")
        assert button.variants == {"Type": ["Primary", "Secondary"], "Size": ["Small", "Large"]}


def test_normalize_variants_apply(cli_engine, components):
    result = runner.invoke(app, ["normalize-variants", "--apply"])

    assert result.exit_code == 0
    assert "Updated 1 component(s)" in result.output
    with Session(cli_engine) as session:
        button = crud.get_component_by_slug(session=session, slug="button")
        assert button.variants == {"variant": ["primary", "secondary"], "size": ["sm", "lg"]}

    again = runner.invoke(app, ["normalize-variants", "--apply"])
    assert "already normalised" in again.output


def test_create_user(cli_engine):
    result = runner.invoke(
        app,
        ["create-user", "new@example.com", "--role", "admin"],
        input="user-password\nuser-password\n",
    )

    assert result.exit_code == 0
    with Session(cli_engine) as session:
        assert crud.get_user_by_email(session=session, email="new@example.com").role == "admin"


def test_create_user_rejects_unknown_role(cli_engine):
    result = runner.invoke(
        app,
        ["create-user", "new@example.com", "--role", "owner", "--password", "user-password"],
    )

    assert result.exit_code == 1


def test_set_password(cli_engine):
    result = runner.invoke(app, ["set-password", "--password", "brand-new-password"])

    assert result.exit_code == 0
    with Session(cli_engine) as session:
        assert crud.verify_admin_password(session=session, password="brand-new-password")


def test_set_password_too_short(cli_engine):
    result = runner.invoke(app, ["set-password", "--password", "short"])

    assert result.exit_code == 1


def test_import_creates_new_entries_and_skips_existing(cli_engine, themes, tmp_path):
    theme_dir = tmp_path / "themes"
    theme_dir.mkdir()
    (theme_dir / "ocean.json").write_text(
        json.dumps({"name": "Ocean", "value": "ocean", "colors": {"primary": "#0ea5e9"}, "spacing": None})
    )
    (theme_dir / "light.json").write_text(json.dumps({"name": "Light again", "value": "light"}))
    (theme_dir / "notes.txt").write_text("not a theme")

    component_dir = tmp_path / "components"
    component_dir.mkdir()
    (component_dir / "badge.json").write_text(
        json.dumps({
            "name": "Badge",
            "slug": "badge",
            "category": "feedback",
            "code": "export function Badge() {}",
            "variants": {"variant": ["default"]},
        })
    )
    (component_dir / "widget.json").write_text(json.dumps({"name": "Widget", "category": "widgets"}))
    (component_dir / "broken.json").write_text("{not json")

    result = runner.invoke(
        app, ["import", "--themes", str(theme_dir), "--components", str(component_dir)]
    )

    assert result.exit_code == 0
    assert "Imported 1 theme(s)" in result.output
    assert "Skipped light.json" in result.output
    assert "Imported 1 component(s)" in result.output
    assert "Failed widget.json" in result.output
    assert "Failed broken.json" in result.output
    with Session(cli_engine) as session:
        ocean = crud.get_theme_by_value(session=session, value="ocean")
        assert ocean.colors == {"primary": "#0ea5e9"}
        assert ocean.spacing == {}
        assert crud.get_theme_by_value(session=session, value="light").name == "Light"
        assert crud.get_active_theme(session=session).value == "light"
        badge = crud.get_component_by_slug(session=session, slug="badge")
        assert badge.category == "feedback"
        assert badge.prompts == {}
        assert crud.get_component_by_slug(session=session, slug="widget") is None


def test_import_skips_missing_directory(cli_engine, tmp_path):
    result = runner.invoke(app, ["import", "--themes", str(tmp_path / "missing")])

    assert result.exit_code == 0
    assert "not found, skipping themes" in " ".join(result.output.split())


def test_import_requires_a_directory(cli_engine):
    result = runner.invoke(app, ["import"])

    assert result.exit_code == 1
