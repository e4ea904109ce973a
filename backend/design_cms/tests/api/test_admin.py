from unittest.mock import patch

from sqlmodel import select

from design_cms.models import Component, Theme

THEME_PAYLOAD = {
    "name": "Ocean",
    "value": "ocean",
    "colors": {"primary": "#0ea5e9", "background": "#f0f9ff"},
    "typography": {"fontFamily": "Inter"},
}

COMPONENT_PAYLOAD = {
    "name": "Alert Dialog",
    "description": "Modal confirmation",
    "category": "overlays",
    "code": "export function AlertDialog() {}",
    "props": [{"name": "open", "type": "boolean", "required": False}],
    "variants": {"Type": ["Default", "Destructive"], "size": ["sm"]},
    "prompts": {"basic": ["Ask before deleting"], "advanced": [], "useCases": []},
    "examples": [{"name": "Basic", "code": "<AlertDialog />"}],
    "installation": {"dependencies": ["@radix-ui/react-alert-dialog"], "setupSteps": []},
}


def _active_values(session) -> list[str]:
    session.expire_all()
    return [t.value for t in session.exec(select(Theme).where(Theme.is_active == True)).all()]  # noqa: E712


def test_admin_api_requires_session(client, themes):
    assert client.get("/api/admin/themes").status_code == 401
    assert client.post("/api/admin/themes", json=THEME_PAYLOAD).status_code == 401
    assert client.get("/api/admin/stats").json() == {"error": "Authentication required"}


def test_create_theme(admin_client):
    response = admin_client.post("/api/admin/themes", json=THEME_PAYLOAD)

    assert response.status_code == 201
    body = response.json()
    assert body["value"] == "ocean"
    assert body["is_active"] is False
    assert body["spacing"] == {}


def test_duplicate_theme_value_conflicts(admin_client, themes):
    response = admin_client.post("/api/admin/themes", json={**THEME_PAYLOAD, "value": "light"})

    assert response.status_code == 409


def test_posting_two_active_themes_leaves_one_active(admin_client, session):
    first = admin_client.post(
        "/api/admin/themes", json={**THEME_PAYLOAD, "value": "dark", "is_active": True}
    )
    second = admin_client.post(
        "/api/admin/themes", json={**THEME_PAYLOAD, "value": "light", "is_active": True}
    )

    assert first.status_code == 201
    assert second.status_code == 201
    assert _active_values(session) == ["light"]


def test_activate_theme(admin_client, session, themes):
    _, dark = themes

    response = admin_client.post(f"/api/admin/themes/{dark.id}/activate")

    assert response.status_code == 200
    assert response.json()["is_active"] is True
    assert _active_values(session) == ["dark"]
    assert admin_client.get("/api/public/active-theme").json()["value"] == "dark"


def test_update_theme(editor_client, themes):
    _, dark = themes

    response = editor_client.put(
        f"/api/admin/themes/{dark.id}", json={"colors": {"primary": "#000000"}}
    )

    assert response.status_code == 200
    assert response.json()["colors"] == {"primary": "#000000"}
    assert response.json()["name"] == "Dark"


def test_delete_active_theme_is_rejected(admin_client, session, themes):
    light, _ = themes

    response = admin_client.delete(f"/api/admin/themes/{light.id}")

    assert response.status_code == 400
    assert response.json() == {"error": "Cannot delete active theme"}
    session.expire_all()
    assert session.get(Theme, light.id) is not None


def test_delete_inactive_theme(admin_client, session, themes):
    _, dark = themes

    response = admin_client.delete(f"/api/admin/themes/{dark.id}")

    assert response.status_code == 200
    assert response.json() == {"message": "Theme deleted successfully"}
    assert admin_client.get("/api/public/themes/dark").status_code == 404


def test_anonymous_delete_is_unauthorized(client, themes):
    _, dark = themes

    response = client.delete(f"/api/admin/themes/{dark.id}")

    assert response.status_code == 401


def test_editor_cannot_delete(editor_client, themes, components):
    _, dark = themes
    button, _ = components

    theme_response = editor_client.delete(f"/api/admin/themes/{dark.id}")
    component_response = editor_client.delete(f"/api/admin/components/{button.id}")

    assert theme_response.status_code == 403
    assert component_response.status_code == 403
    assert theme_response.json() == {"error": "Admin access required"}


def test_missing_theme_id(admin_client):
    response = admin_client.post("/api/admin/themes/00000000-0000-0000-0000-000000000000/activate")

    assert response.status_code == 404
    assert response.json() == {"error": "Theme not found"}


def test_component_round_trip(editor_client):
    created = editor_client.post("/api/admin/components", json=COMPONENT_PAYLOAD)

    assert created.status_code == 201
    assert created.json()["slug"] == "alert-dialog"

    fetched = editor_client.get("/api/public/components/alert-dialog").json()
    for key in ("variants", "props", "prompts", "examples", "installation", "code"):
        assert fetched[key] == COMPONENT_PAYLOAD[key]


def test_component_with_unknown_category_is_rejected(editor_client):
    response = editor_client.post(
        "/api/admin/components", json={**COMPONENT_PAYLOAD, "category": "widgets"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"


def test_duplicate_component_slug_conflicts(editor_client, components):
    response = editor_client.post(
        "/api/admin/components", json={**COMPONENT_PAYLOAD, "name": "Button"}
    )

    assert response.status_code == 409


def test_update_component(editor_client, components):
    button, _ = components

    response = editor_client.put(
        f"/api/admin/components/{button.id}",
        json={"description": "Primary call to action", "variants": {"variant": ["default"]}},
    )

    assert response.status_code == 200
    assert response.json()["description"] == "Primary call to action"
    assert response.json()["variants"] == {"variant": ["default"]}
    assert response.json()["slug"] == "button"


def test_admin_deletes_component(admin_client, session, components):
    button, _ = components

    response = admin_client.delete(f"/api/admin/components/{button.id}")

    assert response.status_code == 200
    session.expire_all()
    assert session.exec(select(Component).where(Component.slug == "button")).first() is None


def test_admin_component_list_is_newest_first(editor_client, components):
    response = editor_client.get("/api/admin/components")

    assert response.status_code == 200
    assert {c["slug"] for c in response.json()} == {"button", "text-input"}


def test_stats(editor_client, themes, components):
    response = editor_client.get("/api/admin/stats")

    assert response.json() == {"themes": 2, "components": 2, "active_theme": "Light"}


def test_theme_update_rejects_null_fields(editor_client, themes):
    _, dark = themes

    response = editor_client.put(f"/api/admin/themes/{dark.id}", json={"colors": None})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    listed = editor_client.get("/api/public/themes")
    assert listed.status_code == 200
    assert listed.json()["themes"][0]["colors"] == {"primary": "#3b82f6"}


def test_component_update_rejects_null_fields(editor_client, components):
    button, _ = components

    for body in ({"variants": None}, {"name": None}):
        response = editor_client.put(f"/api/admin/components/{button.id}", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request"

    fetched = editor_client.get("/api/public/components/button")
    assert fetched.status_code == 200
    assert fetched.json()["name"] == "Button"
    assert fetched.json()["variants"] == {"Type": ["Primary", "Secondary"], "Size": ["Small", "Large"]}


def test_concurrent_activation_conflicts(admin_client, session, themes):
    _, dark = themes

    with patch("design_cms.crud._deactivate_other_themes"):
        response = admin_client.post(f"/api/admin/themes/{dark.id}/activate")

    assert response.status_code == 409
    assert "retry" in response.json()["error"]
    assert _active_values(session) == ["light"]
