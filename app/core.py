from pydantic import BaseModel, ConfigDict
from typing import Optional, Dict, Any, List, Union

from .models import Product

# Request bodies. Unknown fields are dropped on create, kept on update.

class ProductIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    code: Optional[str] = None
    price: Optional[Union[int, float]] = None
    status: Optional[bool] = None
    stock: Optional[int] = None
    category: Optional[str] = None
    thumbnails: Optional[List[str]] = None

class ProductUpdate(ProductIn):
    """Partial update; every field the client actually sent is merged, known or not."""

    model_config = ConfigDict(extra="allow")

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)

def _make_product_dict(product_id: int, p: ProductIn) -> Dict[str, Any]:
    return Product(id=product_id, **p.model_dump()).model_dump()
