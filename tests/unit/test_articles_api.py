import re

NEWS = {"type": "news", "title": "Shop opening", "excerpt": "We are open", "image": "/news.jpg"}
CARD = {"type": "knowledge", "title": "What is D2?", "excerpt": "Tool steel", "icon": "gradient"}
POST = {
    "type": "blog", "title": "Forging day", "excerpt": "Behind the scenes", "image": "/blog.jpg",
    "content": "Long story", "publishDate": "2024-05-01", "readTime": "5 min",
}


def _create(c, payload):
    response = c.post("/api/articles", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_each_type_with_prefixed_ids(admin_client):
    news, card, post = (_create(admin_client, p) for p in (NEWS, CARD, POST))

    assert re.match(r"^n_[0-9a-z]+$", news["id"])
    assert re.match(r"^k_[0-9a-z]+$", card["id"])
    assert re.match(r"^b_[0-9a-z]+$", post["id"])
    assert post["publishDate"] == "2024-05-01"
    assert card["createdBy"]["name"] == "admin"


def test_list_by_type(admin_client):
    for payload in (NEWS, CARD, POST, {**NEWS, "title": "Restock"}):
        _create(admin_client, payload)

    assert admin_client.get("/api/articles").json()["total"] == 4
    news = admin_client.get("/api/articles", params={"type": "news"}).json()
    assert [a["title"] for a in news["articles"]] == ["Shop opening", "Restock"]
    assert admin_client.get("/api/articles", params={"type": "podcast"}).json()["total"] == 4
    assert admin_client.get("/api/articles", params={"type": "all"}).json()["total"] == 4


def test_type_rules_are_enforced(admin_client):
    response = admin_client.post("/api/articles", json={**CARD, "icon": "hexagon"})
    blog = admin_client.post("/api/articles", json={"type": "blog", "title": "t", "excerpt": "e"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields: icon"
    assert blog.status_code == 400
    for field in ("image", "content", "publishDate", "readTime"):
        assert field in blog.json()["detail"]


def test_writes_require_admin(client):
    assert client.post("/api/articles", json=NEWS).status_code == 401
    assert client.put("/api/articles/n_x", json={"title": "x"}).status_code == 401
    assert client.delete("/api/articles/n_x").status_code == 401


def test_update_and_delete(admin_client):
    created = _create(admin_client, NEWS)

    updated = admin_client.put(f"/api/articles/{created['id']}", json={"title": "Grand opening"}).json()

    assert updated["title"] == "Grand opening"
    assert updated["createdAt"] == created["createdAt"]
    assert admin_client.delete(f"/api/articles/{created['id']}").status_code == 200
    assert admin_client.get(f"/api/articles/{created['id']}").status_code == 404
    assert admin_client.put(f"/api/articles/{created['id']}", json={"title": "x"}).status_code == 404
