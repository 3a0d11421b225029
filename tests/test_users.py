# tests/test_users.py
from newsverify.models import UserRole


def test_list_users_admin_only(client, auth, admin, reader, member):
    r = client.get("/users", headers=auth(reader))
    assert r.status_code == 403

    r = client.get("/users", headers=auth(member))
    assert r.status_code == 403

    r = client.get("/users")
    assert r.status_code == 401

    r = client.get("/users", headers=auth(admin))
    assert r.status_code == 200
    emails = {u["email"] for u in r.json()}
    assert emails == {"admin@example.com", "member@example.com", "reader@example.com"}
    assert all("passwordHash" not in u for u in r.json())


def test_update_role(client, auth, admin, reader):
    r = client.patch(f"/users/{reader}/role", json={"role": "MEMBER"}, headers=auth(admin))
    assert r.status_code == 200
    assert r.json() == {"id": reader, "role": "MEMBER"}


def test_update_role_validation_and_permissions(client, auth, admin, member, reader):
    r = client.patch(f"/users/{reader}/role", json={"role": "OWNER"}, headers=auth(admin))
    assert r.status_code == 400

    r = client.patch(f"/users/{reader}/role", json={"role": "ADMIN"}, headers=auth(member))
    assert r.status_code == 403

    r = client.patch("/users/missing/role", json={"role": "ADMIN"}, headers=auth(admin))
    assert r.status_code == 404


def test_admin_can_demote_self(client, auth, admin):
    r = client.patch(f"/users/{admin}/role", json={"role": "READER"}, headers=auth(admin))
    assert r.status_code == 200
    assert r.json()["role"] == "READER"

    # The demotion applies immediately to the same token
    r = client.get("/users", headers=auth(admin))
    assert r.status_code == 403


def test_update_own_profile_is_partial(client, auth, reader):
    r = client.patch("/users/me", json={"firstName": "Renamed"}, headers=auth(reader))
    assert r.status_code == 200
    body = r.json()
    assert body["firstName"] == "Renamed"
    assert body["lastName"] == "User"
    assert body["role"] == "READER"

    r = client.patch(
        "/users/me", json={"avatarUrl": "https://img.example.com/a.png"}, headers=auth(reader)
    )
    assert r.status_code == 200
    assert r.json()["avatarUrl"] == "https://img.example.com/a.png"
    assert r.json()["firstName"] == "Renamed"


def test_profile_update_never_accepts_role(client, auth, reader):
    r = client.patch("/users/me", json={"role": "ADMIN"}, headers=auth(reader))
    assert r.status_code == 400

    r = client.get("/auth/me", headers=auth(reader))
    assert r.json()["role"] == "READER"


def test_profile_update_validation(client, auth, reader):
    r = client.patch("/users/me", json={"avatarUrl": "not-a-url", "firstName": ""}, headers=auth(reader))
    assert r.status_code == 400
    fields = {i["field"] for i in r.json()["error"]}
    assert len(fields) == 2

    r = client.patch("/users/me", json={"firstName": "X"})
    assert r.status_code == 401
