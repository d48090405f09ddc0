# tests/test_concurrency.py
import asyncio
import threading

import httpx
from fastapi.testclient import TestClient

from app.database import JsonFileStore
from app.main import create_app
from app.services import CartService, ProductService

async def _add_task(ac, cid, pid):
    return await ac.post(f"/api/carts/{cid}/product/{pid}")

async def _run_adds(app, count):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        await ac.post("/api/carts")
        results = await asyncio.gather(*(_add_task(ac, "1", "5") for _ in range(count)))
        products = (await ac.get("/api/carts/1")).json()
    return results, products

def test_concurrent_adds_to_one_cart(tmp_path):
    app = create_app(store=JsonFileStore(tmp_path))
    results, products = asyncio.run(_run_adds(app, 10))
    assert [r.status_code for r in results] == [200] * 10
    assert products == [{"product": "5", "quantity": 10}]

def test_threaded_creates_get_distinct_ids(tmp_path):
    # services share one store, so its per-collection lock serializes writers
    store = JsonFileStore(tmp_path)
    errors = []

    def worker(n):
        try:
            ProductService(store).create({"title": f"p{n}"})
            CartService(store).create()
        except Exception as e:  # surfaced by the assert below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert [p["id"] for p in ProductService(store).list()] == list(range(1, 17))
    assert [c["id"] for c in store.load("carts")] == [str(n) for n in range(1, 17)]

def test_threaded_adds_do_not_lose_updates(tmp_path):
    store = JsonFileStore(tmp_path)
    svc = CartService(store)
    svc.create()

    threads = [threading.Thread(target=svc.add_product, args=("1", "7")) for _ in range(25)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert svc.get_products("1") == [{"product": "7", "quantity": 25}]

def test_routes_run_in_threadpool_and_serialize_writers(tmp_path):
    app = create_app(store=JsonFileStore(tmp_path))
    # sync handlers go to the threadpool, where the store lock does the work
    for route in app.routes:
        if getattr(route, "path", "").startswith("/api/"):
            assert not asyncio.iscoroutinefunction(route.endpoint), route.path

    TestClient(app).post("/api/carts")
    statuses = []

    def worker():
        with TestClient(app) as client:
            statuses.append(client.post("/api/carts/1/product/4").status_code)

    threads = [threading.Thread(target=worker) for _ in range(12)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert statuses == [200] * 12
    assert TestClient(app).get("/api/carts/1").json() == [{"product": "4", "quantity": 12}]
