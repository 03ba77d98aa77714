from fastapi.testclient import TestClient


def _create_product(client, nama="Kopi", harga=15000, stok=10, category_id=1):
    r = client.post("/produk", json={"nama": nama, "harga": harga, "stok": stok, "category_id": category_id})
    assert r.status_code == 201
    return r.json()


def test_end_to_end_kopi(client: TestClient):
    cat = client.post("/categories", json={"name": "Beverages"}).json()
    assert cat == {"id": 1, "name": "Beverages", "description": ""}

    kopi = _create_product(client)
    _create_product(client, nama="Teh", harga=5000)
    _create_product(client, nama="Kopi Luwak", harga=90000)

    r = client.get("/produk", params={"nama": "kopi", "minHarga": 10000, "maxHarga": 50000})
    assert r.status_code == 200
    assert r.json() == [{"id": 1, "nama": "Kopi", "harga": 15000, "stok": 10, "category_id": 1}]

    assert client.delete(f"/produk/{kopi['id']}").status_code == 204
    r = client.get(f"/produk/{kopi['id']}")
    assert r.status_code == 404
    assert r.json()["error_code"] == "NOT_FOUND"


def test_zero_price_bounds_impose_no_constraint(client: TestClient):
    _create_product(client, harga=100)
    _create_product(client, harga=900000)
    assert len(client.get("/produk", params={"minHarga": 0}).json()) == 2
    assert len(client.get("/produk", params={"maxHarga": 0}).json()) == 2
    assert len(client.get("/produk", params={"minHarga": "x"}).json()) == 2


def test_empty_list_is_json_array(client: TestClient):
    r = client.get("/produk")
    assert r.status_code == 200
    assert r.json() == []


def test_create_from_form(client: TestClient):
    r = client.post("/produk", data={"nama": "Roti", "harga": "12k", "stok": "4", "category_id": "2"})
    assert r.status_code == 201
    assert r.json() == {"id": 1, "nama": "Roti", "harga": 0, "stok": 4, "category_id": 2}

    r = client.post("/categories", data={"name": "Bakery", "description": "Fresh"})
    assert r.status_code == 201
    assert r.json()["name"] == "Bakery"


def test_api_prefix_alias(client: TestClient):
    r = client.post("/api/produk", json={"nama": "Kopi", "harga": 1})
    assert r.status_code == 201
    assert client.get("/produk/1").json()["nama"] == "Kopi"


def test_malformed_body_and_invalid_id(client: TestClient):
    assert client.post("/produk", content=b"{oops", headers={"Content-Type": "application/json"}).status_code == 400
    assert client.get("/produk/abc").status_code == 400
    assert client.delete("/categories/abc").status_code == 400
    r = client.put("/produk/abc", json={"nama": "x"})
    assert r.status_code == 400
    assert r.json()["error_code"] == "BAD_REQUEST"


def test_ids_must_be_plain_ascii_integers(client: TestClient):
    for n in range(10):
        _create_product(client, nama=f"p{n + 1}")
    for raw in ["1_0", "\u0663", "%205", "5%20", "1.0", "0x1"]:
        assert client.get(f"/produk/{raw}").status_code == 400, raw
        assert client.delete(f"/produk/{raw}").status_code == 400, raw
        assert client.get(f"/categories/{raw}").status_code == 400, raw
    assert len(client.get("/produk").json()) == 10
    assert client.get("/produk/+3").json()["id"] == 3
    assert client.get("/produk/-1").status_code == 404


def test_empty_id_is_bad_request(client: TestClient):
    assert client.get("/produk/").status_code == 400
    assert client.put("/produk/", json={"nama": "x"}).status_code == 400
    assert client.delete("/categories/").status_code == 400
    assert client.get("/api/produk/").json()["error_code"] == "BAD_REQUEST"


def test_form_and_query_numbers_are_strict(client: TestClient):
    r = client.post("/produk", data={"nama": "Gula", "harga": "1_000", "stok": " 5"})
    assert r.json()["harga"] == 0
    assert r.json()["stok"] == 0
    client.put("/produk/1", json={"nama": "Gula", "harga": 500})
    assert len(client.get("/produk", params={"minHarga": "1_000"}).json()) == 1
    assert len(client.get("/produk", params={"maxHarga": " 100"}).json()) == 1


def test_update_product(client: TestClient):
    _create_product(client)
    r = client.put("/produk/1", json={"nama": "Kopi Susu", "harga": 18000, "stok": -1, "category_id": 3})
    assert r.status_code == 200
    assert r.json() == {"id": 1, "nama": "Kopi Susu", "harga": 18000, "stok": -1, "category_id": 3}
    assert client.put("/produk/2", json={"nama": "x"}).status_code == 404
    assert client.put("/produk/1", content=b"[]", headers={"Content-Type": "application/json"}).status_code == 400


def test_delete_missing_is_404(client: TestClient):
    assert client.delete("/produk/7").status_code == 404
    assert client.delete("/categories/7").status_code == 404


def test_category_crud(client: TestClient):
    client.post("/categories", json={"name": "A", "description": "first"})
    client.post("/categories", json={"name": "B", "description": "second"})
    assert client.get("/categories/2").json()["name"] == "B"
    r = client.put("/categories/2", json={"name": "B2", "description": "changed"})
    assert r.json() == {"id": 2, "name": "B2", "description": "changed"}
    assert client.delete("/categories/1").status_code == 204
    assert [c["id"] for c in client.get("/categories").json()] == [2]
    assert client.post("/categories", json={"name": "C"}).json()["id"] == 3


def test_products_fragment_mode(client: TestClient, htmx):
    r = client.get("/produk", headers=htmx)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/html")
    assert "No products found." in r.text

    client.post("/categories", json={"name": "Beverages"})
    _create_product(client, category_id=1)
    _create_product(client, nama="Es", category_id=42)
    r = client.get("/produk", headers=htmx)
    assert "<td>Beverages</td>" in r.text
    assert "<td>No Category</td>" in r.text


def test_categories_fragment_mode(client: TestClient, htmx):
    assert "No categories found." in client.get("/categories", headers=htmx).text
    client.post("/categories", json={"name": "Snacks", "description": "Ringan"})
    r = client.get("/categories", headers=htmx)
    assert "<td>Snacks</td>" in r.text
    assert "deleteCategory(1)" in r.text


def test_stats_and_category_options(client: TestClient):
    client.post("/categories", json={"name": "A"})
    client.post("/categories", json={"name": "B"})
    _create_product(client)
    _create_product(client)
    client.delete("/produk/2")

    assert client.get("/api/stats").json() == {
        "total_products": 1,
        "total_categories": 2,
        "last_product_id": 2,
        "last_category_id": 2,
    }
    r = client.get("/api/category-options")
    assert r.headers["content-type"].startswith("text/html")
    assert r.text == '<option value="1">A</option><option value="2">B</option>'


def test_method_not_allowed(client: TestClient):
    r = client.patch("/produk/1", json={})
    assert r.status_code == 405
    assert r.json()["error_code"] == "METHOD_NOT_ALLOWED"
    assert client.delete("/produk").status_code == 405
    assert client.post("/api/stats").status_code == 405


def test_request_id_is_echoed(client: TestClient):
    r = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert r.status_code == 200
    assert r.headers["X-Request-ID"] == "abc-123"
    assert r.json()["status"] == "healthy"
