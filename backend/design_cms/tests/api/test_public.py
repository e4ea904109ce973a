def test_list_themes_ordered_by_name(client, themes):
    response = client.get("/api/public/themes")

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert [t["value"] for t in body["themes"]] == ["dark", "light"]


def test_get_theme_by_value(client, themes):
    response = client.get("/api/public/themes/light")

    assert response.status_code == 200
    assert response.json()["colors"] == {"primary": "#2563eb"}
    assert response.json()["is_active"] is True


def test_unknown_theme(client):
    response = client.get("/api/public/themes/sepia")

    assert response.status_code == 404
    assert response.json() == {"error": "Theme not found"}


def test_list_components_by_category(client, components):
    response = client.get("/api/public/components", params={"category": "inputs"})

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["components"][0]["slug"] == "text-input"


def test_list_components_limit_is_bounded(client, components):
    assert client.get("/api/public/components", params={"limit": 1}).json()["count"] == 1
    assert client.get("/api/public/components", params={"limit": 0}).status_code == 400


def test_get_component_keeps_stored_variants(client, components):
    response = client.get("/api/public/components/button")

    assert response.status_code == 200
    assert response.json()["variants"] == {"Type": ["Primary", "Secondary"], "Size": ["Small", "Large"]}


def test_unknown_component(client):
    response = client.get("/api/public/components/missing")

    assert response.status_code == 404
    assert response.json() == {"error": "Component not found"}


def test_search_is_case_insensitive(client, components):
    response = client.get("/api/public/search", params={"q": "TEXT"})

    assert response.status_code == 200
    body = response.json()
    assert body["query"] == "TEXT"
    assert [c["slug"] for c in body["results"]] == ["text-input"]


def test_search_with_category(client, components):
    response = client.get("/api/public/search", params={"q": "t", "category": "buttons"})

    assert [c["slug"] for c in response.json()["results"]] == ["button"]


def test_search_requires_query(client):
    response = client.get("/api/public/search", params={"q": "  "})

    assert response.status_code == 400
    assert response.json() == {"error": 'Query parameter "q" is required'}


def test_active_theme(client, themes):
    response = client.get("/api/public/active-theme")

    assert response.status_code == 200
    assert response.json()["value"] == "light"


def test_no_active_theme(client):
    response = client.get("/api/public/active-theme")

    assert response.status_code == 404
    assert response.json() == {"error": "No active theme"}


def test_public_api_allows_any_origin(client, themes):
    response = client.get("/api/public/themes", headers={"Origin": "https://docs.example.com"})

    assert response.headers["access-control-allow-origin"] == "*"


def test_preflight_allows_get(client):
    response = client.options(
        "/api/public/components",
        headers={
            "Origin": "https://docs.example.com",
            "Access-Control-Request-Method": "GET",
        },
    )

    assert response.status_code == 200
    assert "GET" in response.headers["access-control-allow-methods"]


def test_health_check(client):
    response = client.get("/api/utils/health-check/")

    assert response.status_code == 200
    assert response.json()["database"] is True
