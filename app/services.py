import logging
from typing import Optional, Dict, Any, List, Union

from .core import ProductIn, ProductUpdate, _make_product_dict
from .database import JsonFileStore, next_id
from .models import Cart, LineItem

# This file contains the collection logic behind every API endpoint.
# Each operation reloads its collection from the store and writes the
# whole collection back after a mutation.

logger = logging.getLogger(__name__)

PRODUCTS = "products"
CARTS = "carts"


class NotFoundError(Exception):
    """Raised when a product or cart id has no matching record."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def _same_id(stored: Any, wanted: Any) -> bool:
    # path params arrive as text, product ids are stored as numbers
    return str(stored) == str(wanted)


def _find_index(records: List[Dict[str, Any]], wanted: Any) -> int:
    for i, record in enumerate(records):
        if _same_id(record.get("id"), wanted):
            return i
    return -1


class ProductService:
    not_found = "Producto no encontrado"

    def __init__(self, store: JsonFileStore):
        self.store = store

    def list(self) -> List[Dict[str, Any]]:
        return self.store.load(PRODUCTS)

    def get(self, pid: Union[int, str]) -> Dict[str, Any]:
        products = self.store.load(PRODUCTS)
        index = _find_index(products, pid)
        if index == -1:
            raise NotFoundError(self.not_found)
        return products[index]

    def create(self, fields: Union[ProductIn, Dict[str, Any], None] = None) -> Dict[str, Any]:
        payload = fields if isinstance(fields, ProductIn) else ProductIn.model_validate(fields or {})
        with self.store.lock(PRODUCTS):
            products = self.store.load(PRODUCTS)
            product = _make_product_dict(next_id(products), payload)
            products.append(product)
            self.store.save(PRODUCTS, products)
        logger.info("created product %s", product["id"])
        return product

    def update(self, pid: Union[int, str], partial: Union[ProductUpdate, Dict[str, Any]]) -> Dict[str, Any]:
        changes = partial.changes() if isinstance(partial, ProductUpdate) else dict(partial)
        with self.store.lock(PRODUCTS):
            products = self.store.load(PRODUCTS)
            index = _find_index(products, pid)
            if index == -1:
                raise NotFoundError(self.not_found)
            current = products[index]
            updated = {**current, **changes, "id": current["id"]}
            products[index] = updated
            self.store.save(PRODUCTS, products)
        logger.info("updated product %s (%s)", updated["id"], ", ".join(sorted(changes)) or "no fields")
        return updated

    def remove(self, pid: Union[int, str]) -> Dict[str, str]:
        with self.store.lock(PRODUCTS):
            products = self.store.load(PRODUCTS)
            index = _find_index(products, pid)
            if index == -1:
                raise NotFoundError(self.not_found)
            removed = products.pop(index)
            self.store.save(PRODUCTS, products)
        logger.info("removed product %s", removed["id"])
        return {"mensaje": "Producto eliminado"}


class CartService:
    not_found = "Carrito no encontrado"

    def __init__(self, store: JsonFileStore):
        self.store = store

    def _find(self, carts: List[Dict[str, Any]], cid: Union[int, str]) -> Dict[str, Any]:
        index = _find_index(carts, cid)
        if index == -1:
            raise NotFoundError(self.not_found)
        return carts[index]

    def create(self) -> Dict[str, Any]:
        with self.store.lock(CARTS):
            carts = self.store.load(CARTS)
            cart = Cart(id=str(next_id(carts))).model_dump()
            carts.append(cart)
            self.store.save(CARTS, carts)
        logger.info("created cart %s", cart["id"])
        return cart

    def get_products(self, cid: Union[int, str]) -> List[Dict[str, Any]]:
        carts = self.store.load(CARTS)
        return self._find(carts, cid)["products"]

    def add_product(self, cid: Union[int, str], pid: Union[int, str]) -> Dict[str, Any]:
        # the product reference is not checked against the products collection
        product_ref = str(pid)
        with self.store.lock(CARTS):
            carts = self.store.load(CARTS)
            cart = self._find(carts, cid)
            existing: Optional[Dict[str, Any]] = None
            for item in cart["products"]:
                if _same_id(item.get("product"), product_ref):
                    existing = item
                    break
            if existing is not None:
                existing["quantity"] += 1
            else:
                cart["products"].append(LineItem(product=product_ref).model_dump())
            self.store.save(CARTS, carts)
        logger.info("cart %s: product %s added", cart["id"], product_ref)
        return cart
