"""Bundled handler modules — discovery of transwarp.handlers end to end.

Tests cover:
    - The default package registers health, auth, API console and attachments
    - Documented /api/ handlers appear in the API doc index
    - Theme pages render with site metadata; manage pages need a contributor
    - Sign-in sets a session cookie that the default identity parser accepts
    - Uploads land in the scratch directory with their extension kept
"""

import os

from transwarp.core.roles import Identity, Role
from transwarp.infrastructure.identity import (
    InMemoryUserStore, StoredUser, hash_password,
)

PACKAGE = "transwarp.handlers"


def _user_store() -> InMemoryUserStore:
    editor = Identity("u-ed", "Editor", "editor@example.com", Role.EDITOR)
    reader = Identity("u-rd", "Reader", "reader@example.com", Role.SUBSCRIBER)
    return InMemoryUserStore([
        StoredUser(editor, hash_password("s3cret", rounds=4)),
        StoredUser(reader, hash_password("hunter2", rounds=4)),
    ])


async def test_default_package_routes(make_client):
    client = make_client(package=PACKAGE)
    table = client.app.state.route_table
    routes = {(e.verb.value, e.path) for e in table.entries}
    assert {
        ("GET", "/api/health"),
        ("GET", "/auth/"),
        ("GET", "/auth/signout"),
        ("POST", "/api/authenticate"),
        ("GET", "/manage/api/"),
        ("POST", "/api/attachments"),
        ("GET", "/error"),
    } <= routes


async def test_documented_api_handlers_indexed(make_client):
    client = make_client(package=PACKAGE)
    docs = client.app.state.api_docs
    health = docs.get("health", "GET", "/api/health")
    assert health is not None
    assert health.doc.startswith("Basic liveness probe.")
    assert docs.get("auth", "POST", "/api/authenticate") is not None
    assert docs.get("attachments", "POST", "/api/attachments") is not None


async def test_health(make_client):
    client = make_client(package=PACKAGE)
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_signin_page_renders_theme(make_client):
    client = make_client(package=PACKAGE, website_name="Transwarp Blog")
    res = await client.get("/auth/")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")
    assert "Transwarp Blog" in res.text
    assert 'action="/api/authenticate"' in res.text


async def test_api_console_requires_contributor(make_client):
    client = make_client(package=PACKAGE)
    res = await client.get("/manage/api/", headers={"X-Test-User": "u-sub"})
    assert res.status_code == 302
    assert res.headers["location"] == "/auth/"


async def test_api_console_lists_docs(make_client):
    client = make_client(package=PACKAGE)
    res = await client.get("/manage/api/", headers={"X-Test-User": "u-admin"})
    assert res.status_code == 200
    assert "Signed in as Admin" in res.text
    assert "GET /api/health" in res.text
    assert "Basic liveness probe." in res.text


async def test_signin_flow_with_session_cookie(make_client):
    client = make_client(package=PACKAGE, user_store=_user_store())
    res = await client.post(
        "/api/authenticate", data={"email": "editor@example.com", "passwd": "s3cret"},
    )
    assert res.status_code == 200
    assert res.json()["name"] == "Editor"
    assert "transwarpsession" in res.cookies

    res = await client.get("/manage/api/")
    assert res.status_code == 200
    assert "Signed in as Editor" in res.text


async def test_signin_bad_password(make_client):
    client = make_client(package=PACKAGE, user_store=_user_store())
    res = await client.post(
        "/api/authenticate", data={"email": "editor@example.com", "passwd": "wrong"},
    )
    assert res.status_code == 401
    assert res.json()["error"] == "auth:failed"


async def test_signin_missing_email(make_client):
    client = make_client(package=PACKAGE, user_store=_user_store())
    res = await client.post("/api/authenticate", data={"passwd": "x"})
    assert res.status_code == 400
    assert res.json() == {
        "error": "parameter:invalid",
        "data": "email",
        "message": "Invalid or missing parameter: email",
    }


async def test_subscriber_session_still_redirected_from_manage(make_client):
    client = make_client(package=PACKAGE, user_store=_user_store())
    await client.post(
        "/api/authenticate", data={"email": "reader@example.com", "passwd": "hunter2"},
    )
    res = await client.get("/manage/api/")
    assert res.status_code == 302


async def test_upload_kept_with_extension(make_client):
    client = make_client(package=PACKAGE)
    res = await client.post(
        "/api/attachments",
        files={"file": ("photo.png", b"\x89PNG-data", "image/png")},
        headers={"X-Test-User": "u-contrib"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["name"] == "photo.png"
    assert body["size"] == len(b"\x89PNG-data")
    assert body["stored"].endswith(".png")
    upload_dir = client.app.state.settings.upload_dir
    assert os.path.isfile(os.path.join(upload_dir, body["stored"]))


async def test_upload_requires_contributor(make_client):
    client = make_client(package=PACKAGE)
    res = await client.post(
        "/api/attachments",
        files={"file": ("a.txt", b"x", "text/plain")},
        headers={"X-Test-User": "u-sub"},
    )
    assert res.status_code == 403
    assert res.json()["error"] == "permission:denied"


async def test_upload_without_file(make_client):
    client = make_client(package=PACKAGE)
    res = await client.post(
        "/api/attachments", data={"other": "x"}, headers={"X-Test-User": "u-admin"},
    )
    assert res.status_code == 400
    assert res.json()["data"] == "file"
