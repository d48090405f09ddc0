#!/usr/bin/env python
import requests
from sdk.flatstore import StoreClient

def main():
    c = StoreClient(base_url="http://127.0.0.1:3000")

    # -----------------------------
    # Create products
    # -----------------------------
    print("Creating products...")
    prod1 = c.create_product("Laptop", 1500, 3, description="14 inch", code="LAP-01", category="electronics")
    prod2 = c.create_product("Mouse", 25, 10, description="wireless", code="MOU-01", category="electronics")
    print(prod1)
    print(prod2)

    # -----------------------------
    # List / get
    # -----------------------------
    print("\nListing products...")
    print(c.list_products())
    print(f"\nProduct {prod1['id']}...")
    print(c.get_product(prod1["id"]))

    # -----------------------------
    # Update (id stays pinned even if we send one)
    # -----------------------------
    print("\nUpdating price of the mouse...")
    print(c.update_product(prod2["id"], price=19.9, id=999))

    # -----------------------------
    # Carts
    # -----------------------------
    print("\nCreating a cart...")
    cart = c.create_cart()
    print(cart)

    print("\nAdding the laptop twice and the mouse once...")
    c.add_to_cart(cart["id"], prod1["id"])
    c.add_to_cart(cart["id"], prod1["id"])
    print(c.add_to_cart(cart["id"], prod2["id"]))

    print("\nCart line items...")
    print(c.get_cart_products(cart["id"]))

    # -----------------------------
    # Delete
    # -----------------------------
    print(f"\nDeleting product {prod1['id']}...")
    print(c.delete_product(prod1["id"]))
    try:
        c.get_product(prod1["id"])
    except requests.HTTPError as e:
        print(f"Lookup after delete: {e.response.status_code} {e.response.json()}")

if __name__ == "__main__":
    main()
