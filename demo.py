#!/usr/bin/env python
from catalog_sdk.client import CatalogClient


def main():
    # dev backend: python -m catalog_api.main
    c = CatalogClient(base_url="http://127.0.0.1:7077/api")

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting store...")
    c.session.post(f"{c.base_url.rsplit('/api', 1)[0]}/reset")

    # -----------------------------
    # Create categories
    # -----------------------------
    print("\nCreating categories...")
    phones = c.add_category("Phones", "Smartphones and feature phones")
    laptops = c.add_category("Laptops")
    print(phones)
    print(laptops)

    # -----------------------------
    # Create products
    # -----------------------------
    print("\nCreating products...")
    p1 = c.add_product("Pixel 9", 21990000, "128 GB", phones["id"])
    p2 = c.add_product("ThinkPad X1", 35500000, "", laptops["id"])
    print(p1)
    print(p2)

    # -----------------------------
    # Update a product
    # -----------------------------
    print("\nUpdating price...")
    print(c.update_product(p1["id"], p1["name"], 19990000, p1["description"], phones["id"]))

    # -----------------------------
    # Delete a category; its products stay behind
    # -----------------------------
    print("\nDeleting 'Laptops'...")
    print(c.delete_category(laptops["id"]))

    print("\nListing...")
    print(c.list_categories())
    print(c.list_products())


if __name__ == "__main__":
    main()
