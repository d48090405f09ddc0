# sdk/flatstore.py
import requests
import httpx
from typing import Optional, Dict, Any

class StoreClient:
    def __init__(self, base_url: str = "http://127.0.0.1:3000", timeout: int = 10):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return f"{self.base_url}/api{path}"

    # Products
    def list_products(self):
        r = self.session.get(self._url("/products"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_product(self, product_id):
        r = self.session.get(self._url(f"/products/{product_id}"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def create_product(self, title: str, price: float, stock: int = 0, description: str = "",
                       code: str = "", category: str = "general", status: bool = True,
                       thumbnails: Optional[list] = None):
        r = self.session.post(self._url("/products"), json={
            "title": title, "description": description, "code": code, "price": price,
            "status": status, "stock": stock, "category": category, "thumbnails": thumbnails or [],
        }, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def update_product(self, product_id, **fields: Any):
        r = self.session.put(self._url(f"/products/{product_id}"), json=fields, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def delete_product(self, product_id):
        r = self.session.delete(self._url(f"/products/{product_id}"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Carts
    def create_cart(self):
        r = self.session.post(self._url("/carts"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_cart_products(self, cart_id):
        r = self.session.get(self._url(f"/carts/{cart_id}"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def add_to_cart(self, cart_id, product_id):
        r = self.session.post(self._url(f"/carts/{cart_id}/product/{product_id}"), timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Async add (used by the concurrency demo)
    async def add_to_cart_async(self, cart_id, product_id) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(self._url(f"/carts/{cart_id}/product/{product_id}"))
            r.raise_for_status()
            return r.json()


if __name__ == "__main__":
    import argparse
    import json
    from rich import print

    parser = argparse.ArgumentParser(description="flatstore CLI")
    parser.add_argument("--base-url", default="http://127.0.0.1:3000", help="API base URL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---------------------------
    # Product commands
    # ---------------------------
    subparsers.add_parser("list-products", help="List all products")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True, help="ID of the product")

    cp = subparsers.add_parser("create-product", help="Create a new product")
    cp.add_argument("--title", required=True, help="Product title")
    cp.add_argument("--price", type=float, required=True, help="Unit price")
    cp.add_argument("--stock", type=int, default=0, help="Units in stock")
    cp.add_argument("--description", default="", help="Free text description")
    cp.add_argument("--code", default="", help="Product code")
    cp.add_argument("--category", default="general", help="Product category")

    up = subparsers.add_parser("update-product", help="Update fields of a product")
    up.add_argument("--product-id", required=True, help="ID of the product")
    up.add_argument("--fields", required=True, help='JSON object, e.g. \'{"price": 12.5}\'')

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", required=True, help="ID of the product")

    # ---------------------------
    # Cart commands
    # ---------------------------
    subparsers.add_parser("create-cart", help="Create an empty cart")

    vc = subparsers.add_parser("view-cart", help="List the line items of a cart")
    vc.add_argument("--cart-id", required=True, help="ID of the cart")

    add = subparsers.add_parser("add-to-cart", help="Add one unit of a product to a cart")
    add.add_argument("--cart-id", required=True, help="ID of the cart")
    add.add_argument("--product-id", required=True, help="ID of the product")

    # ---------------------------
    # Parse and execute
    # ---------------------------
    args = parser.parse_args()
    c = StoreClient(base_url=args.base_url)

    if args.command == "list-products":
        print(c.list_products())
    elif args.command == "get-product":
        print(c.get_product(args.product_id))
    elif args.command == "create-product":
        print(c.create_product(args.title, args.price, args.stock, args.description, args.code, args.category))
    elif args.command == "update-product":
        print(c.update_product(args.product_id, **json.loads(args.fields)))
    elif args.command == "delete-product":
        print(c.delete_product(args.product_id))
    elif args.command == "create-cart":
        print(c.create_cart())
    elif args.command == "view-cart":
        print(c.get_cart_products(args.cart_id))
    elif args.command == "add-to-cart":
        print(c.add_to_cart(args.cart_id, args.product_id))
