from conftest import auth_header


def test_profile_defaults_to_demo_user(client):
    response = client.get("/api/users/profile")
    assert response.status_code == 200
    user = response.json()["data"]
    assert user["id"] == "demo-user"
    assert user["name"] == "Demo User"
    assert user["email"] == "demo@example.com"
    assert "createdAt" not in user


def test_profile_from_token(client):
    headers = auth_header("user-7", "Lin", email="lin@example.com")
    user = client.get("/api/users/profile", headers=headers).json()["data"]
    assert user["id"] == "user-7"
    assert user["name"] == "Lin"
    assert user["email"] == "lin@example.com"
    assert "avatar" not in user


def test_invalid_token_is_rejected(client):
    response = client.get("/api/users/profile", headers={"Authorization": "Bearer not.a.token"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Invalid or expired token"}


def test_user_wishes(client):
    client.post("/api/wishes", json={"content": "My first signed wish", "category": "family"})
    client.post(
        "/api/wishes",
        json={"content": "My anonymous wish here", "category": "family", "isAnonymous": True},
    )
    data = client.get("/api/users/demo-user/wishes").json()["data"]
    assert data["total"] == 1
    assert data["wishes"][0]["content"] == "My first signed wish"


def test_user_wishes_of_seeded_author(client):
    data = client.get("/api/users/user4/wishes", params={"limit": 5}).json()["data"]
    assert [w["id"] for w in data["wishes"]] == ["4"]
    assert data["limit"] == 5
    assert data["totalPages"] == 1


def test_user_wishes_unknown_user_is_empty(client):
    data = client.get("/api/users/nobody/wishes").json()["data"]
    assert data == {"wishes": [], "total": 0, "page": 1, "limit": 10, "totalPages": 0}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["uptime"] >= 0
    assert "timestamp" in body


def test_unknown_route(client):
    response = client.get("/api/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "API endpoint not found"}
