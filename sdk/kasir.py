# sdk/kasir.py
import requests
import httpx
from typing import Any, Dict, List, Optional


class KasirClient:
    def __init__(self, base_url: str = "http://localhost:8080", timeout: int = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _product_payload(name: str, price: int, stock: int, category_id: int) -> Dict[str, Any]:
        return {"nama": name, "harga": price, "stok": stock, "category_id": category_id}

    # Products
    def create_product(self, name: str, price: int, stock: int, category_id: int = 0):
        r = self.session.post(self._url("/produk"), json=self._product_payload(name, price, stock, category_id),
                              timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def list_products(self, nama: Optional[str] = None, min_harga: Optional[int] = None,
                      max_harga: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {}
        if nama:
            params["nama"] = nama
        if min_harga:
            params["minHarga"] = min_harga
        if max_harga:
            params["maxHarga"] = max_harga
        r = self.session.get(self._url("/produk"), params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def products_fragment(self, nama: Optional[str] = None) -> str:
        params = {"nama": nama} if nama else {}
        r = self.session.get(self._url("/produk"), params=params, headers={"HX-Request": "true"},
                             timeout=self.timeout)
        r.raise_for_status()
        return r.text

    def get_product(self, product_id: int):
        r = self.session.get(self._url(f"/produk/{product_id}"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def update_product(self, product_id: int, name: str, price: int, stock: int, category_id: int = 0):
        r = self.session.put(self._url(f"/produk/{product_id}"),
                             json=self._product_payload(name, price, stock, category_id), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_product(self, product_id: int) -> None:
        r = self.session.delete(self._url(f"/produk/{product_id}"), timeout=self.timeout)
        r.raise_for_status()

    # Categories
    def create_category(self, name: str, description: str = ""):
        r = self.session.post(self._url("/categories"), json={"name": name, "description": description},
                              timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def list_categories(self) -> List[Dict[str, Any]]:
        r = self.session.get(self._url("/categories"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_category(self, category_id: int):
        r = self.session.get(self._url(f"/categories/{category_id}"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def update_category(self, category_id: int, name: str, description: str = ""):
        r = self.session.put(self._url(f"/categories/{category_id}"),
                             json={"name": name, "description": description}, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_category(self, category_id: int) -> None:
        r = self.session.delete(self._url(f"/categories/{category_id}"), timeout=self.timeout)
        r.raise_for_status()

    # Dashboard helpers
    def stats(self) -> Dict[str, int]:
        r = self.session.get(self._url("/api/stats"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def category_options(self) -> str:
        r = self.session.get(self._url("/api/category-options"), timeout=self.timeout)
        r.raise_for_status()
        return r.text

    # Async create (used by the concurrency demo)
    async def create_product_async(self, name: str, price: int, stock: int, category_id: int = 0,
                                   client: Optional[httpx.AsyncClient] = None):
        payload = self._product_payload(name, price, stock, category_id)
        if client is not None:
            r = await client.post(self._url("/produk"), json=payload)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as ac:
                r = await ac.post(self._url("/produk"), json=payload)
        r.raise_for_status()
        return r.json()


if __name__ == "__main__":
    import argparse
    from rich import print

    parser = argparse.ArgumentParser(description="Kasir catalog CLI")
    parser.add_argument("--base-url", default="http://127.0.0.1:8080")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lp = subparsers.add_parser("list-products", help="List products")
    lp.add_argument("--nama", help="Name contains (case-insensitive)")
    lp.add_argument("--min-harga", type=int, help="Minimum price")
    lp.add_argument("--max-harga", type=int, help="Maximum price")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--id", type=int, required=True)

    cp = subparsers.add_parser("create-product", help="Create a product")
    cp.add_argument("--nama", required=True)
    cp.add_argument("--harga", type=int, required=True)
    cp.add_argument("--stok", type=int, default=0)
    cp.add_argument("--category-id", type=int, default=0)

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--id", type=int, required=True)

    subparsers.add_parser("list-categories", help="List categories")

    cc = subparsers.add_parser("create-category", help="Create a category")
    cc.add_argument("--name", required=True)
    cc.add_argument("--description", default="")

    dc = subparsers.add_parser("delete-category", help="Delete a category")
    dc.add_argument("--id", type=int, required=True)

    subparsers.add_parser("stats", help="Show catalog counters")

    args = parser.parse_args()
    c = KasirClient(base_url=args.base_url)

    if args.command == "list-products":
        print(c.list_products(args.nama, args.min_harga, args.max_harga))
    elif args.command == "get-product":
        print(c.get_product(args.id))
    elif args.command == "create-product":
        print(c.create_product(args.nama, args.harga, args.stok, args.category_id))
    elif args.command == "delete-product":
        c.delete_product(args.id)
        print(f"deleted product {args.id}")
    elif args.command == "list-categories":
        print(c.list_categories())
    elif args.command == "create-category":
        print(c.create_category(args.name, args.description))
    elif args.command == "delete-category":
        c.delete_category(args.id)
        print(f"deleted category {args.id}")
    elif args.command == "stats":
        print(c.stats())
