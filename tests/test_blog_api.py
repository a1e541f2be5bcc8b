"""
End-to-end tests for blog CRUD and the ownership checks.
"""

from pathlib import Path
from unittest.mock import AsyncMock, patch

from utils.errors import StoreFailure

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _create(client, headers, title="t", description="d", image=None):
    files = {"image": image} if image else None
    resp = client.post(
        "/blog",
        data={"title": title, "description": description},
        files=files,
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["blogId"]


def _blogs(client):
    return {b["id"]: b for b in client.get("/blogs").json()}


class TestCreateAndList:
    def test_create_requires_token(self, client):
        resp = client.post("/blog", data={"title": "t", "description": "d"})
        assert resp.status_code == 401

    def test_create_with_invalid_token(self, client):
        resp = client.post(
            "/blog",
            data={"title": "t", "description": "d"},
            headers={"Authorization": "Bearer nope"},
        )
        assert resp.status_code == 403

    def test_create_without_image(self, client, login_as):
        headers = login_as("alice")
        resp = client.post("/blog", data={"title": "Hello", "description": "World"}, headers=headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Blog created successfully"
        blog = _blogs(client)[body["blogId"]]
        assert blog["title"] == "Hello"
        assert blog["image"] is None

    def test_create_with_image_is_served(self, client, login_as, settings):
        headers = login_as("alice")
        blog_id = _create(client, headers, image=("../../evil.PNG", PNG, "image/png"))
        name = _blogs(client)[blog_id]["image"]
        assert name.endswith(".png")
        assert "/" not in name and ".." not in name
        assert (Path(settings.upload_dir) / name).read_bytes() == PNG

        served = client.get(f"/uploads/{name}")
        assert served.status_code == 200
        assert served.content == PNG

    def test_disallowed_extension_rejected(self, client, login_as, settings):
        headers = login_as("alice")
        resp = client.post(
            "/blog",
            data={"title": "t", "description": "d"},
            files={"image": ("shell.php", b"<?php", "image/png")},
            headers=headers,
        )
        assert resp.status_code == 400
        assert "not allowed" in resp.json()["error"]
        assert list(Path(settings.upload_dir).iterdir()) == []
        assert _blogs(client) == {}

    def test_oversized_image_rejected(self, client, login_as, settings):
        headers = login_as("alice")
        resp = client.post(
            "/blog",
            data={"title": "t", "description": "d"},
            files={"image": ("big.png", b"x" * (settings.max_upload_bytes + 1), "image/png")},
            headers=headers,
        )
        assert resp.status_code == 400
        assert list(Path(settings.upload_dir).iterdir()) == []

    def test_missing_title_is_400(self, client, login_as):
        headers = login_as("alice")
        resp = client.post("/blog", data={"description": "d"}, headers=headers)
        assert resp.status_code == 400
        assert "title" in resp.json()["error"]

    def test_list_is_public_and_includes_every_owner(self, client, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        ids = [_create(client, alice, "a1"), _create(client, bob, "b1"), _create(client, alice, "a2")]

        resp = client.get("/blogs")
        assert resp.status_code == 200
        listed = resp.json()
        assert [b["id"] for b in listed] == ids
        assert len({b["userid"] for b in listed}) == 2
        assert set(listed[0]) == {"id", "userid", "title", "description", "image"}

    def test_store_failure_is_sanitized_and_image_removed(self, client, login_as, settings):
        headers = login_as("alice")
        with patch("api.routes.create_blog", new_callable=AsyncMock) as mock_create:
            mock_create.side_effect = StoreFailure()
            resp = client.post(
                "/blog",
                data={"title": "t", "description": "d"},
                files={"image": ("pic.png", PNG, "image/png")},
                headers=headers,
            )
        assert resp.status_code == 500
        assert resp.json() == {"error": "Database error"}
        assert list(Path(settings.upload_dir).iterdir()) == []


class TestUpdate:
    def test_owner_partial_update(self, client, login_as):
        headers = login_as("alice")
        blog_id = _create(client, headers, "title", "desc")

        resp = client.put(f"/blog/{blog_id}", data={"description": "changed"}, headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Blog updated successfully", "updatedImage": None}

        blog = _blogs(client)[blog_id]
        assert (blog["title"], blog["description"]) == ("title", "changed")

    def test_image_replacement_keeps_old_file(self, client, login_as, settings):
        headers = login_as("alice")
        blog_id = _create(client, headers, image=("one.png", PNG, "image/png"))
        old_name = _blogs(client)[blog_id]["image"]

        resp = client.put(
            f"/blog/{blog_id}",
            data={"title": "t2"},
            files={"image": ("two.jpg", b"jpegdata", "image/jpeg")},
            headers=headers,
        )
        assert resp.status_code == 200
        new_name = resp.json()["updatedImage"]
        assert new_name.endswith(".jpg")
        assert _blogs(client)[blog_id]["image"] == new_name
        assert (Path(settings.upload_dir) / old_name).exists()

    def test_store_failure_on_update_removes_new_image(self, client, login_as, settings):
        headers = login_as("alice")
        blog_id = _create(client, headers, image=("one.png", PNG, "image/png"))
        old_name = _blogs(client)[blog_id]["image"]

        with patch("api.routes.update_blog", new_callable=AsyncMock) as mock_update:
            mock_update.side_effect = StoreFailure()
            resp = client.put(
                f"/blog/{blog_id}",
                data={"title": "t2"},
                files={"image": ("two.png", PNG, "image/png")},
                headers=headers,
            )
        assert resp.status_code == 500
        assert resp.json() == {"error": "Database error"}
        assert [p.name for p in Path(settings.upload_dir).iterdir()] == [old_name]
        assert _blogs(client)[blog_id]["image"] == old_name

    def test_non_owner_forbidden_and_record_unchanged(self, client, login_as, settings):
        alice = login_as("alice")
        bob = login_as("bob")
        blog_id = _create(client, alice, "mine", "desc")

        resp = client.put(
            f"/blog/{blog_id}",
            data={"title": "stolen"},
            files={"image": ("x.png", PNG, "image/png")},
            headers=bob,
        )
        assert resp.status_code == 403
        assert resp.json() == {"error": "Unauthorized"}
        assert _blogs(client)[blog_id]["title"] == "mine"
        assert list(Path(settings.upload_dir).iterdir()) == []

    def test_missing_blog_is_404(self, client, login_as):
        headers = login_as("alice")
        resp = client.put("/blog/999", data={"title": "x"}, headers=headers)
        assert resp.status_code == 404
        assert resp.json() == {"error": "Blog not found"}

    def test_update_requires_token(self, client, login_as):
        blog_id = _create(client, login_as("alice"))
        assert client.put(f"/blog/{blog_id}", data={"title": "x"}).status_code == 401


class TestDelete:
    def test_owner_delete(self, client, login_as):
        headers = login_as("alice")
        blog_id = _create(client, headers)
        resp = client.delete(f"/blog/{blog_id}", headers=headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Blog deleted successfully"}
        assert _blogs(client) == {}

    def test_non_owner_forbidden(self, client, login_as):
        alice = login_as("alice")
        bob = login_as("bob")
        blog_id = _create(client, alice)
        resp = client.delete(f"/blog/{blog_id}", headers=bob)
        assert resp.status_code == 403
        assert blog_id in _blogs(client)

    def test_nonexistent_is_404_not_403(self, client, login_as):
        alice = login_as("alice")
        _create(client, alice)
        bob = login_as("bob")
        resp = client.delete("/blog/999", headers=bob)
        assert resp.status_code == 404

    def test_token_checked_before_existence(self, client):
        assert client.delete("/blog/999").status_code == 401
        assert client.delete("/blog/999", headers={"Authorization": "Bearer x"}).status_code == 403
