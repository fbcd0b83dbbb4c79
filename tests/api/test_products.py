"""Tests for product API endpoints."""

from fastapi.testclient import TestClient


def product_body(**overrides: object) -> dict:
    """Valid product request body."""
    body: dict = {
        "name": "Laptop",
        "price": 1299.5,
        "description": "Thin and light",
        "characteristics": [{"name": "RAM", "value": "16 GB"}],
        "images": [{"url": "/uploads/laptop.png"}],
    }
    body.update(overrides)
    return body


class TestCreateProduct:
    """Tests for POST /api/products."""

    def test_create(self, client: TestClient) -> None:
        """Product is returned with its characteristics and images."""
        response = client.post("/api/products", json=product_body())

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Laptop"
        assert data["price"] == 1299.5
        assert data["characteristics"][0]["name"] == "RAM"
        assert data["images"][0]["url"] == "/uploads/laptop.png"
        assert data["categoryId"] is None

    def test_with_taxonomy_references(self, client: TestClient) -> None:
        """Category and search tree references are stored."""
        category = client.post("/api/categories", json={"name": "Computers"}).json()
        node = client.post("/api/search-tree", json={"name": "Portable"}).json()

        response = client.post(
            "/api/products",
            json=product_body(categoryId=category["id"], searchTreeId=node["id"]),
        )

        data = response.json()
        assert data["categoryId"] == category["id"]
        assert data["searchTreeId"] == node["id"]

    def test_unknown_category(self, client: TestClient) -> None:
        """References must exist."""
        response = client.post("/api/products", json=product_body(categoryId=999))

        assert response.status_code == 400
        assert response.json()["errorCode"] == "VALIDATION_ERROR"

    def test_too_many_images(self, client: TestClient) -> None:
        """More than five images is refused."""
        images = [{"url": f"/uploads/{i}.png"} for i in range(6)]

        response = client.post("/api/products", json=product_body(images=images))

        assert response.status_code == 400
        assert response.json()["errorCode"] == "VALIDATION_ERROR"

    def test_negative_price(self, client: TestClient) -> None:
        """Price must not be negative."""
        response = client.post("/api/products", json=product_body(price=-5))
        assert response.status_code == 400

    def test_missing_name(self, client: TestClient) -> None:
        """Name is required."""
        body = product_body()
        del body["name"]

        response = client.post("/api/products", json=body)

        assert response.status_code == 400
        assert "name" in response.json()["error"]


class TestReadProducts:
    """Tests for GET /api/products."""

    def test_list_and_filter(self, client: TestClient) -> None:
        """Filters match the direct references."""
        shoes = client.post("/api/categories", json={"name": "Shoes"}).json()
        client.post("/api/products", json=product_body(name="Boot", categoryId=shoes["id"]))
        client.post("/api/products", json=product_body(name="Lamp"))

        everything = client.get("/api/products").json()
        filtered = client.get("/api/products", params={"categoryId": shoes["id"]}).json()

        assert [p["name"] for p in everything] == ["Boot", "Lamp"]
        assert [p["name"] for p in filtered] == ["Boot"]

    def test_get(self, client: TestClient) -> None:
        """Single product by id."""
        created = client.post("/api/products", json=product_body()).json()

        response = client.get(f"/api/products/{created['id']}")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    def test_get_missing(self, client: TestClient) -> None:
        """Unknown product is 404."""
        response = client.get("/api/products/999")

        assert response.status_code == 404
        assert response.json()["errorCode"] == "NOT_FOUND"


class TestUpdateProduct:
    """Tests for PUT /api/products/{id}."""

    def test_replaces_characteristics_and_images(self, client: TestClient) -> None:
        """Update swaps nested rows wholesale."""
        created = client.post("/api/products", json=product_body()).json()

        response = client.put(
            f"/api/products/{created['id']}",
            json=product_body(
                price=999,
                characteristics=[{"name": "RAM", "value": "32 GB"}, {"name": "SSD", "value": "1 TB"}],
                images=[],
            ),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["price"] == 999
        assert [(c["name"], c["value"]) for c in data["characteristics"]] == [
            ("RAM", "32 GB"),
            ("SSD", "1 TB"),
        ]
        assert data["images"] == []

        fetched = client.get(f"/api/products/{created['id']}").json()
        assert len(fetched["characteristics"]) == 2
        assert fetched["images"] == []

    def test_missing(self, client: TestClient) -> None:
        """Unknown product is 404."""
        response = client.put("/api/products/999", json=product_body())
        assert response.status_code == 404


class TestDeleteProduct:
    """Tests for DELETE /api/products/{id}."""

    def test_delete(self, client: TestClient) -> None:
        """Deleted products are gone."""
        created = client.post("/api/products", json=product_body()).json()

        response = client.delete(f"/api/products/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert client.get(f"/api/products/{created['id']}").status_code == 404

    def test_missing(self, client: TestClient) -> None:
        """Unknown product is 404."""
        assert client.delete("/api/products/999").status_code == 404
