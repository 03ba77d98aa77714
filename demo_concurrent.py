import asyncio
import os

import httpx

from sdk.kasir import KasirClient

CALLERS = 100


async def create_one(c: KasirClient, client: httpx.AsyncClient, n: int):
    try:
        return await c.create_product_async(f"Produk {n}", 1000 + n, 1, client=client)
    except httpx.HTTPStatusError as e:
        print(f"❌ caller {n} failed with status {e.response.status_code}")
    except httpx.HTTPError as e:
        print(f"❌ caller {n} failed: {e}")
    return None


async def main():
    c = KasirClient(base_url=os.environ.get("KASIR_BASE_URL", "http://127.0.0.1:8080"))
    before = c.stats()["last_product_id"]

    print(f"\n⚡ Creating {CALLERS} products concurrently...")
    async with httpx.AsyncClient(timeout=c.timeout) as client:
        results = await asyncio.gather(*(create_one(c, client, n) for n in range(CALLERS)))

    ids = sorted(r["id"] for r in results if r)
    expected = list(range(before + 1, before + CALLERS + 1))
    if ids == expected:
        print(f"✅ {len(ids)} products, ids {ids[0]}..{ids[-1]} with no gaps or duplicates")
    else:
        missing = sorted(set(expected) - set(ids))
        print(f"⚠️  got {len(ids)} ids, missing {missing[:10]}")

    print("📊 Stats:", c.stats())


if __name__ == "__main__":
    asyncio.run(main())
