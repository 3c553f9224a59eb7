def test_search_users_by_email_fragment(auth_client, make_user):
    client, _ = auth_client
    make_user("alice@example.com")
    make_user("alicia@example.org")
    make_user("bob@example.com")

    response = client.get("/users/search", params={"email": "ALI"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "Users retrieved successfully"
    assert [u["email"] for u in payload["users"]] == [
        "alice@example.com",
        "alicia@example.org",
    ]
    assert payload["count"] == 2
    assert "password_hash" not in payload["users"][0]


def test_search_users_respects_limit(auth_client, make_user):
    client, _ = auth_client
    for i in range(5):
        make_user(f"member{i}@example.com")

    response = client.get("/users/search", params={"email": "member", "limit": 2})

    assert response.json()["count"] == 2


def test_search_users_requires_two_characters(auth_client):
    client, _ = auth_client

    response = client.get("/users/search", params={"email": " a "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Email search term must be at least 2 characters long"


def test_search_users_treats_wildcards_literally(auth_client, make_user):
    client, _ = auth_client
    make_user("percent@example.com")

    response = client.get("/users/search", params={"email": "%%"})

    assert response.json()["count"] == 0


def test_search_users_requires_authentication(client):
    response = client.get("/users/search", params={"email": "alice"})

    assert response.status_code == 401
