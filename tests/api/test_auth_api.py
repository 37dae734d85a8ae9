"""HTTP tests for /v1/auth."""

REGISTER_BODY = {"first_name": "Ana", "last_name": "Gomez", "email": "ana@example.com", "password": "secret1"}


def test_register_then_login(api):
    response = api.post("/v1/auth/register", json=REGISTER_BODY)
    assert response.status_code == 201
    assert response.json()["role"] == "Client"

    response = api.post("/v1/auth/login", json={"email": "ana@example.com", "password": "secret1"})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["email"] == "ana@example.com"


def test_register_duplicate_email(api):
    api.post("/v1/auth/register", json=REGISTER_BODY)
    response = api.post("/v1/auth/register", json=REGISTER_BODY)
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ConflictException"


def test_register_as_admin_is_rejected(api):
    response = api.post("/v1/auth/register", json={**REGISTER_BODY, "role": "Admin"})
    assert response.status_code == 422


def test_bad_credentials(api):
    response = api.post("/v1/auth/login", json={"email": "ghost@example.com", "password": "whatever"})
    assert response.status_code == 401


def test_me(api, user_headers):
    response = api.get("/v1/auth/me", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["email"] == "user@test.com"


def test_me_without_token(api):
    assert api.get("/v1/auth/me").status_code == 401
    assert api.get("/v1/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_health(api):
    assert api.get("/health").json() == {"status": "healthy"}
