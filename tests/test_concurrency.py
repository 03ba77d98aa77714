import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor

import httpx

from app.database import CatalogStore, ReadWriteLock
from app.filters import ProductFilter
from app.models import CategoryIn, ProductIn

CALLERS = 100


def test_concurrent_creates_get_gap_free_ids(store: CatalogStore):
    with ThreadPoolExecutor(max_workers=32) as pool:
        results = list(pool.map(
            lambda n: store.create_product(ProductIn(name=f"p{n}", price=n, stock=1)),
            range(CALLERS),
        ))
    assert sorted(p.id for p in results) == list(range(1, CALLERS + 1))
    listed = store.list_products()
    assert [p.id for p in listed] == list(range(1, CALLERS + 1))


def test_readers_see_consistent_snapshots_during_writes(store: CatalogStore):
    done = threading.Event()
    bad = []

    def reader():
        while not done.is_set():
            ids = [p.id for p in store.list_products(ProductFilter())]
            # ids are appended in order and never reused, so a snapshot is always a prefix
            if ids != list(range(1, len(ids) + 1)):
                bad.append(ids)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for t in threads:
        t.start()
    try:
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda n: store.create_product(ProductIn(name=str(n))), range(200)))
    finally:
        done.set()
        for t in threads:
            t.join()

    assert bad == []
    assert store.stats()["total_products"] == 200


def test_cross_collection_traffic_does_not_deadlock(store: CatalogStore):
    def work(n):
        store.create_category(CategoryIn(name=f"c{n}"))
        store.create_product(ProductIn(name=f"p{n}", category_id=n))
        store.list_products()
        store.list_categories()
        store.stats()

    with ThreadPoolExecutor(max_workers=16) as pool:
        futures = [pool.submit(work, n) for n in range(50)]
        for f in futures:
            f.result(timeout=10)
    assert store.stats()["last_category_id"] == 50
    assert store.stats()["last_product_id"] == 50


def test_rwlock_allows_concurrent_readers():
    lock = ReadWriteLock()
    both_inside = threading.Barrier(2, timeout=5)

    def reader():
        with lock.read_locked():
            both_inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)
    assert not both_inside.broken


def test_rwlock_writer_excludes_readers():
    lock = ReadWriteLock()
    events = []
    lock.acquire_write()

    def reader():
        with lock.read_locked():
            events.append("read")

    t = threading.Thread(target=reader)
    t.start()
    t.join(timeout=0.2)
    assert events == []
    events.append("write done")
    lock.release_write()
    t.join(timeout=5)
    assert events == ["write done", "read"]


async def _create_many(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        return await asyncio.gather(*(
            ac.post("/produk", json={"nama": f"Produk {n}", "harga": 1000, "stok": 1})
            for n in range(CALLERS)
        ))


def test_concurrent_http_creates(app, client):
    responses = asyncio.run(_create_many(app))
    assert all(r.status_code == 201 for r in responses)
    assert sorted(r.json()["id"] for r in responses) == list(range(1, CALLERS + 1))
    assert client.get("/api/stats").json()["last_product_id"] == CALLERS
