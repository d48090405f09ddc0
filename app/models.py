# app/models.py
from pydantic import BaseModel, Field
from typing import List, Optional, Union

class Product(BaseModel):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    code: Optional[str] = None
    price: Optional[Union[int, float]] = None
    status: Optional[bool] = None
    stock: Optional[int] = None
    category: Optional[str] = None
    thumbnails: Optional[List[str]] = None

class LineItem(BaseModel):
    product: str
    quantity: int = Field(default=1, ge=1)

class Cart(BaseModel):
    id: str
    products: List[LineItem] = []
