"""Integration tests for /print."""

from gallery.utils.printing import PrintProviderError, print_manager


class TestPrintApi:
    def request_body(self, artwork, product_types):
        return {
            "artworkUrl": artwork.original_url or "https://cdn.example/nebula.webp",
            "productTypes": product_types,
            "artworkTitle": artwork.title,
            "artworkId": artwork.id,
        }

    def test_catalogue(self, client):
        body = client.get("/print/products").json()

        assert body["totalTypes"] == 6
        assert {p["type"] for p in body["recommended"]} == {"canvas", "poster", "sticker"}

    def test_create_collects_per_type_results(self, client, admin_headers, artwork, monkeypatch):
        calls = []

        async def fake_create(artwork_url, product_type, title):
            calls.append((product_type, title))
            if product_type == "mug":
                raise PrintProviderError("No print provider accepted the mug product")
            return {"printful": "pf-1", "printify": None}

        monkeypatch.setattr(print_manager, "create_product_on_all_platforms", fake_create)

        response = client.post(
            "/print/create",
            json=self.request_body(artwork, ["canvas", "mug", "hologram"]),
            headers=admin_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Created 1/3 print products successfully"
        assert body["summary"] == {"total": 3, "successful": 1, "failed": 2}
        assert body["results"][0]["printful"] == "pf-1"
        assert body["results"][2]["error"] == "Unknown product type"
        assert calls == [("canvas", "Nebula Dreams"), ("mug", "Nebula Dreams")]

    def test_requires_admin(self, client, auth_headers, artwork):
        response = client.post(
            "/print/create", json=self.request_body(artwork, ["canvas"]), headers=auth_headers
        )

        assert response.status_code == 403

    def test_missing_fields(self, client, admin_headers, artwork):
        body = self.request_body(artwork, [])

        response = client.post("/print/create", json=body, headers=admin_headers)

        assert response.status_code == 400

    def test_unknown_artwork(self, client, admin_headers, artwork):
        body = {**self.request_body(artwork, ["canvas"]), "artworkId": artwork.id + 99}

        response = client.post("/print/create", json=body, headers=admin_headers)

        assert response.status_code == 404
