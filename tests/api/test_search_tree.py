"""Tests for search tree API endpoints."""

from fastapi.testclient import TestClient


def create_node(client: TestClient, name: str, **fields: object) -> dict:
    """Create a search tree node and return the response body."""
    response = client.post("/api/search-tree", json={"name": name, **fields})
    assert response.status_code == 201, response.text
    return response.json()


def create_product(client: TestClient, name: str, search_tree_id: int) -> dict:
    """Create a product attached to a search tree node."""
    response = client.post(
        "/api/products",
        json={"name": name, "price": 10, "searchTreeId": search_tree_id},
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestSearchTreeNodes:
    """Tests for search tree CRUD."""

    def test_create_with_icon(self, client: TestClient) -> None:
        """Search tree nodes carry an icon instead of SEO fields."""
        created = create_node(client, "Кольори", icon="palette")

        assert created["slug"] == "kolory"
        assert created["icon"] == "palette"
        assert "seoTitle" not in created

    def test_independent_from_categories(self, client: TestClient) -> None:
        """The same slug can exist in both taxonomies."""
        client.post("/api/categories", json={"name": "Audio"})
        created = create_node(client, "Audio")

        assert created["slug"] == "audio"
        assert [n["name"] for n in client.get("/api/search-tree").json()] == ["Audio"]

    def test_full_tree(self, client: TestClient) -> None:
        """tree/root expands nested nodes."""
        root = create_node(client, "Size")
        create_node(client, "Large", parentId=root["id"])
        create_node(client, "Small", parentId=root["id"])

        tree = client.get("/api/search-tree/tree/root").json()

        assert [c["name"] for c in tree[0]["children"]] == ["Large", "Small"]
        assert tree[0]["_count"]["children"] == 2

    def test_update_cycle(self, client: TestClient) -> None:
        """Cycles are refused in the search tree too."""
        a = create_node(client, "A")
        b = create_node(client, "B", parentId=a["id"])
        c = create_node(client, "C", parentId=b["id"])

        response = client.put(f"/api/search-tree/{a['id']}", json={"name": "A", "parentId": c["id"]})

        assert response.status_code == 400
        assert response.json()["errorCode"] == "TREE_CYCLE"

    def test_delete_guard(self, client: TestClient) -> None:
        """Nodes with children or products can't be deleted."""
        parent = create_node(client, "Parent")
        child = create_node(client, "Child", parentId=parent["id"])
        product = create_product(client, "Thing", child["id"])

        assert client.delete(f"/api/search-tree/{parent['id']}").json()["errorCode"] == "HAS_CHILDREN"
        assert client.delete(f"/api/search-tree/{child['id']}").json()["errorCode"] == "HAS_PRODUCTS"

        client.delete(f"/api/products/{product['id']}")
        assert client.delete(f"/api/search-tree/{child['id']}").status_code == 200
        assert client.delete(f"/api/search-tree/{parent['id']}").status_code == 200


class TestSearchTreeProducts:
    """Tests for GET /api/search-tree/{id}/products."""

    def test_descendant_products(self, client: TestClient) -> None:
        """A -> B -> C: products anywhere below the node are returned."""
        a = create_node(client, "A")
        b = create_node(client, "B", parentId=a["id"])
        c = create_node(client, "C", parentId=b["id"])
        create_product(client, "On A", a["id"])
        create_product(client, "On B", b["id"])
        create_product(client, "On C", c["id"])

        def names(node_id: int) -> list[str]:
            response = client.get(f"/api/search-tree/{node_id}/products")
            assert response.status_code == 200
            return [p["name"] for p in response.json()]

        assert names(a["id"]) == ["On A", "On B", "On C"]
        assert names(b["id"]) == ["On B", "On C"]
        assert names(c["id"]) == ["On C"]

    def test_unrelated_products_excluded(self, client: TestClient) -> None:
        """Products on sibling subtrees are not returned."""
        colors = create_node(client, "Colors")
        sizes = create_node(client, "Sizes")
        create_product(client, "Large shirt", sizes["id"])

        response = client.get(f"/api/search-tree/{colors['id']}/products")

        assert response.json() == []

    def test_unknown_node(self, client: TestClient) -> None:
        """Unknown node is 404."""
        response = client.get("/api/search-tree/999/products")

        assert response.status_code == 404
        assert response.json()["errorCode"] == "NOT_FOUND"
