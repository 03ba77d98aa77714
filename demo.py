#!/usr/bin/env python
import os

from sdk.kasir import KasirClient


def main():
    c = KasirClient(base_url=os.environ.get("KASIR_BASE_URL", "http://127.0.0.1:8080"))

    # -----------------------------
    # Categories
    # -----------------------------
    print("Creating categories...")
    drinks = c.create_category("Beverages", "Hot and cold drinks")
    snacks = c.create_category("Snacks", "Packaged snacks")
    print(drinks)
    print(snacks)

    # -----------------------------
    # Products
    # -----------------------------
    print("\nCreating products...")
    kopi = c.create_product("Kopi", 15000, 10, drinks["id"])
    teh = c.create_product("Teh Manis", 8000, 25, drinks["id"])
    keripik = c.create_product("Keripik", 12000, 0, snacks["id"])
    orphan = c.create_product("Es Batu", 2000, 100, 999)
    for p in (kopi, teh, keripik, orphan):
        print(p)

    # -----------------------------
    # Filtered listing
    # -----------------------------
    print("\nProducts matching 'kopi' between 10000 and 50000...")
    print(c.list_products(nama="kopi", min_harga=10000, max_harga=50000))

    print("\nSame listing as an HTML fragment...")
    print(c.products_fragment())

    # -----------------------------
    # Update / delete
    # -----------------------------
    print("\nRestocking Keripik...")
    print(c.update_product(keripik["id"], "Keripik", 12000, 40, snacks["id"]))

    print("\nDeleting Kopi...")
    c.delete_product(kopi["id"])
    print(c.list_products())

    print("\nStats:")
    print(c.stats())


if __name__ == "__main__":
    main()
