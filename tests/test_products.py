# tests/test_products.py
import json
import logging

import pytest
from fastapi.testclient import TestClient

from app.database import JsonFileStore
from app.main import create_app
from app.services import NotFoundError, ProductService

LAPTOP = {
    "title": "Laptop", "description": "14 inch", "code": "LAP-01", "price": 1500,
    "status": True, "stock": 3, "category": "electronics", "thumbnails": ["a.png"],
}

def make_client(tmp_path, **kwargs):
    return TestClient(create_app(store=JsonFileStore(tmp_path)), **kwargs)

# ---------------------------
# Service level
# ---------------------------
def test_ids_are_sequential_and_list_keeps_creation_order(tmp_path):
    svc = ProductService(JsonFileStore(tmp_path))
    created = [svc.create({"title": f"p{n}"}) for n in range(1, 5)]
    assert [p["id"] for p in created] == [1, 2, 3, 4]
    assert svc.list() == created
    for p in created:
        assert svc.get(p["id"]) == p
        assert svc.get(str(p["id"])) == p

def test_create_keeps_only_known_fields(tmp_path):
    svc = ProductService(JsonFileStore(tmp_path))
    p = svc.create({**LAPTOP, "color": "red", "id": 42})
    assert p["id"] == 1
    assert "color" not in p
    assert set(p) == {"id", *LAPTOP}

def test_update_merges_and_pins_id(tmp_path):
    svc = ProductService(JsonFileStore(tmp_path))
    svc.create(LAPTOP)
    updated = svc.update("1", {"price": 1200, "stock": 1, "id": 99})
    assert updated["id"] == 1
    assert updated["price"] == 1200
    assert updated["stock"] == 1
    assert updated["title"] == "Laptop"
    assert svc.get(1) == updated

def test_update_and_remove_missing_raise_not_found(tmp_path):
    svc = ProductService(JsonFileStore(tmp_path))
    with pytest.raises(NotFoundError):
        svc.get(1)
    with pytest.raises(NotFoundError):
        svc.update(1, {"price": 1})
    with pytest.raises(NotFoundError) as exc:
        svc.remove(1)
    assert exc.value.message == "Producto no encontrado"

def test_remove_shrinks_collection_by_one(tmp_path):
    svc = ProductService(JsonFileStore(tmp_path))
    for n in range(3):
        svc.create({"title": f"p{n}"})
    assert svc.remove(2) == {"mensaje": "Producto eliminado"}
    assert [p["id"] for p in svc.list()] == [1, 3]
    with pytest.raises(NotFoundError):
        svc.get(2)
    # next id follows the last record
    assert svc.create({"title": "p4"})["id"] == 4

# ---------------------------
# HTTP level
# ---------------------------
def test_product_scenario(tmp_path):
    client = make_client(tmp_path)
    r = client.post("/api/products", json={**LAPTOP, "title": "A", "price": 10})
    assert r.status_code == 201
    assert r.json()["id"] == 1
    r2 = client.post("/api/products", json={"title": "B", "price": 20})
    assert r2.status_code == 201
    assert r2.json()["id"] == 2

    r = client.get("/api/products/1")
    assert r.status_code == 200
    assert r.json()["title"] == "A"
    assert [p["id"] for p in client.get("/api/products").json()] == [1, 2]

    r = client.delete("/api/products/1")
    assert r.status_code == 200
    assert r.json() == {"mensaje": "Producto eliminado"}
    r = client.get("/api/products/1")
    assert r.status_code == 404
    assert r.json() == {"error": "Producto no encontrado"}

def test_products_are_persisted_to_disk(tmp_path):
    client = make_client(tmp_path)
    client.post("/api/products", json=LAPTOP)
    on_disk = json.loads((tmp_path / "products.json").read_text(encoding="utf-8"))
    assert on_disk == [{"id": 1, **LAPTOP}]

def test_put_merges_every_sent_field(tmp_path):
    client = make_client(tmp_path)
    client.post("/api/products", json=LAPTOP)
    r = client.put("/api/products/1", json={"stock": 0, "id": 5, "unknown": "x"})
    assert r.status_code == 200
    body = r.json()
    assert body == {**LAPTOP, "id": 1, "stock": 0, "unknown": "x"}
    # the route and the service agree on extra fields
    assert client.put("/api/products/1", json={"color": "red"}).json()["color"] == "red"
    assert client.get("/api/products/1").json()["unknown"] == "x"

def test_put_without_body(tmp_path):
    client = make_client(tmp_path)
    client.post("/api/products", json=LAPTOP)
    r = client.put("/api/products/1")
    assert r.status_code == 200
    assert r.json() == {**LAPTOP, "id": 1}
    r = client.put("/api/products/99")
    assert r.status_code == 404
    assert r.json() == {"error": "Producto no encontrado"}

def test_put_and_delete_missing_product(tmp_path):
    client = make_client(tmp_path)
    assert client.put("/api/products/7", json={"stock": 1}).status_code == 404
    assert client.delete("/api/products/7").json() == {"error": "Producto no encontrado"}

def test_post_without_body_creates_bare_record(tmp_path):
    client = make_client(tmp_path)
    r = client.post("/api/products")
    assert r.status_code == 201
    assert r.json()["id"] == 1
    assert r.json()["title"] is None

def test_malformed_body_is_bad_request(tmp_path):
    client = make_client(tmp_path)
    r = client.post("/api/products", content="{broken", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert r.json()["error"] == "Cuerpo de la petición inválido"
    r = client.post("/api/products", json={"price": "not a number"})
    assert r.status_code == 400

def test_corrupted_file_is_server_error(tmp_path):
    (tmp_path / "products.json").write_text("[{oops", encoding="utf-8")
    client = make_client(tmp_path, raise_server_exceptions=False)
    r = client.get("/api/products")
    assert r.status_code == 500
    assert r.json() == {"error": "Error interno del servidor"}

def test_mutations_reach_root_logging(tmp_path, caplog):
    client = make_client(tmp_path)
    with caplog.at_level(logging.INFO, logger="app"):
        client.post("/api/products", json=LAPTOP)
        client.delete("/api/products/1")
    assert "created product 1" in caplog.text
    assert "removed product 1" in caplog.text
