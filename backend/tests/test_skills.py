from app.services.seed import SAMPLE_SKILLS


def test_sample_skills_are_seeded(client):
    response = client.get("/api/skills")
    assert response.status_code == 200
    names = {item["name"] for item in response.json()}
    assert {name for name, _category, _description in SAMPLE_SKILLS} <= names


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_create_skill_requires_auth_and_unique_name(client, make_user):
    payload = {"name": "Origami Engineering", "category": "Craft", "description": "Folding structures"}
    assert client.post("/api/skills", json=payload).status_code == 401

    _, headers = make_user("Creator")
    created = client.post("/api/skills", json=payload, headers=headers)
    assert created.status_code == 201
    assert created.json()["name"] == "Origami Engineering"

    duplicate = client.post("/api/skills", json={**payload, "name": "origami engineering"}, headers=headers)
    assert duplicate.status_code == 400


def test_categories_group_skills(client, make_skill):
    skill_id = make_skill("Glaze Chemistry", category="Ceramics")

    response = client.get("/api/skills/categories")
    assert response.status_code == 200
    groups = {group["category"]: group["skills"] for group in response.json()}
    assert "Ceramics" in groups
    assert skill_id in {skill["id"] for skill in groups["Ceramics"]}
    assert "Programming" in groups


def test_search_matches_name_category_and_description(client):
    by_name = client.get("/api/skills/search/pyth")
    assert by_name.status_code == 200
    assert "Python" in {item["name"] for item in by_name.json()}

    by_category = client.get("/api/skills/search/Communication")
    assert "Presentation" in {item["name"] for item in by_category.json()}

    assert client.get("/api/skills/search/zzzz-no-such-skill").json() == []


def test_skill_detail_lists_holders_by_level(client, make_user, make_skill):
    skill_id = make_skill("Kiln Operation", category="Ceramics")
    low_id, low_headers = make_user("Low")
    high_id, high_headers = make_user("High")
    client.post("/api/users/me/skills", json={"skill_id": skill_id, "level": 2}, headers=low_headers)
    client.post("/api/users/me/skills", json={"skill_id": skill_id, "level": 5}, headers=high_headers)

    response = client.get(f"/api/skills/{skill_id}")
    assert response.status_code == 200
    users = response.json()["users"]
    assert [(user["id"], user["level"]) for user in users] == [(high_id, 5), (low_id, 2)]

    assert client.get("/api/skills/999999").status_code == 404
