"""Integration tests for the catalogue, upload and bulk save endpoints."""

from gallery.models.artwork import Artwork


class TestCatalogue:
    """Tests for /artworks."""

    def test_list_is_paginated_newest_first(self, client, make_artwork):
        ids = [make_artwork().id for _ in range(3)]

        body = client.get("/artworks", params={"page": 1, "size": 2}).json()

        assert body["total"] == 3
        assert body["totalPages"] == 2
        assert [a["id"] for a in body["artworks"]] == [ids[2], ids[1]]

    def test_search_and_category(self, client, make_artwork):
        make_artwork("Solar Wind", category="digital")
        make_artwork("Lunar Tide", category="oil")

        search = client.get("/artworks", params={"search": "lunar"}).json()
        category = client.get("/artworks", params={"category": "digital"}).json()

        assert [a["title"] for a in search["artworks"]] == ["Lunar Tide"]
        assert [a["title"] for a in category["artworks"]] == ["Solar Wind"]

    def test_get_by_id_and_slug(self, client, make_artwork):
        artwork = make_artwork("Quasar", slug="quasar")

        assert client.get(f"/artworks/{artwork.id}").json()["title"] == "Quasar"
        assert client.get("/artworks/slug/quasar").json()["id"] == artwork.id
        assert client.get("/artworks/slug/missing").status_code == 404

    def test_delete_requires_admin(self, client, auth_headers, admin_headers, artwork, db):
        assert client.delete(f"/artworks/{artwork.id}", headers=auth_headers).status_code == 403

        response = client.delete(f"/artworks/{artwork.id}", headers=admin_headers)

        assert response.status_code == 204
        assert db.query(Artwork).count() == 0


class TestUpload:
    """Tests for POST /upload and POST /artwork/save."""

    def upload(self, client, headers, content, filename="nebula.png", **data):
        return client.post(
            "/upload",
            files={"file": (filename, content, "image/png")},
            data=data,
            headers=headers,
        )

    def test_upload_processes_and_suggests(self, client, admin_headers, storage_dir, image_bytes):
        response = self.upload(
            client, admin_headers, image_bytes("PNG"), metadata='{"series": "Orbits"}'
        )

        assert response.status_code == 201
        body = response.json()
        info = body["file"]
        assert info["format"] == "webp"
        assert (info["width"], info["height"]) == (320, 240)
        assert info["metadata"]["series"] == "Orbits"
        assert info["metadata"]["source_format"] == "png"
        assert info["originalUrl"].startswith("/storage/artworks/")
        assert (storage_dir / info["originalUrl"].removeprefix("/storage/")).exists()
        assert (storage_dir / info["thumbnailUrl"].removeprefix("/storage/")).exists()
        assert body["aiSuggestions"]["confidence"] == 0.3
        assert body["aiSuggestions"]["title"].startswith("Untitled Artwork")

    def test_upload_requires_admin(self, client, auth_headers, storage_dir, image_bytes):
        assert self.upload(client, auth_headers, image_bytes()).status_code == 403

    def test_upload_rejects_non_image(self, client, admin_headers, storage_dir):
        response = self.upload(client, admin_headers, b"MZ not an image", filename="evil.png")

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid or corrupted image file"

    def test_upload_rejects_bad_metadata(self, client, admin_headers, storage_dir, image_bytes):
        response = self.upload(client, admin_headers, image_bytes(), metadata="{oops")

        assert response.status_code == 400

    def test_upload_rate_limit(self, client, admin_headers, storage_dir, image_bytes):
        content = image_bytes()
        statuses = [self.upload(client, admin_headers, content).status_code for _ in range(6)]

        assert statuses == [201] * 5 + [429]

    def test_upload_then_save(self, client, admin_headers, storage_dir, image_bytes, db):
        uploaded = self.upload(client, admin_headers, image_bytes()).json()
        item = {
            "file": uploaded["file"],
            "aiSuggestions": {**uploaded["aiSuggestions"], "title": "Orbit Song"},
            "category": "digital",
            "price": 240,
        }

        response = client.post(
            "/artwork/save", json={"artworks": [item, item]}, headers=admin_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["saved"] == 2
        assert body["errors"] == []
        assert [a["slug"] for a in body["artworks"]] == ["orbit-song", "orbit-song-2"]
        assert body["artworks"][0]["price"] == 240
        assert db.query(Artwork).count() == 2

    def test_save_rejects_files_outside_storage(
        self, client, admin_headers, storage_dir, image_bytes, db
    ):
        victim = storage_dir.parent / "victim.txt"
        victim.write_text("keep me")
        uploaded = self.upload(client, admin_headers, image_bytes()).json()
        item = {
            "file": {**uploaded["file"], "originalUrl": "../victim.txt"},
            "aiSuggestions": uploaded["aiSuggestions"],
        }

        body = client.post("/artwork/save", json={"artworks": [item]}, headers=admin_headers).json()

        assert body["saved"] == 0
        assert body["errors"][0]["error"] == "Artwork files must come from an upload"
        assert db.query(Artwork).count() == 0
        assert victim.exists()

    def test_delete_removes_stored_files(self, client, admin_headers, storage_dir, image_bytes):
        uploaded = self.upload(client, admin_headers, image_bytes()).json()
        item = {"file": uploaded["file"], "aiSuggestions": uploaded["aiSuggestions"]}
        saved = client.post("/artwork/save", json={"artworks": [item]}, headers=admin_headers)
        artwork_id = saved.json()["artworks"][0]["id"]
        original = storage_dir / uploaded["file"]["originalUrl"].removeprefix("/storage/")

        response = client.delete(f"/artworks/{artwork_id}", headers=admin_headers)

        assert response.status_code == 204
        assert not original.exists()

    def test_save_requires_items(self, client, admin_headers):
        response = client.post("/artwork/save", json={"artworks": []}, headers=admin_headers)

        assert response.status_code == 400
