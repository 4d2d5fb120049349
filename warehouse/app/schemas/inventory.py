from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------- Catalog ----------
class ContainArticle(BaseModel):
    art_id: str = Field(min_length=1, max_length=64)
    amount_of: int = Field(gt=0)  # "4" accepté (lax mode)


class Product(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    contain_articles: list[ContainArticle] = Field(min_length=1)


class Products(BaseModel):
    products: list[Product] = Field(default_factory=list)


# ---------- Stock ----------
class Stock(BaseModel):
    """
    Ligne de stock telle qu'elle circule sur le fil.
    stock = texte décimal d'un entier >= 0 ("12"), un int est normalisé en texte.
    """

    model_config = ConfigDict(from_attributes=True)

    art_id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    stock: str

    @field_validator("stock", mode="before")
    @classmethod
    def _stock_as_text(cls, value):
        if isinstance(value, bool):
            raise ValueError("stock must be a non-negative integer")
        if isinstance(value, int):
            value = str(value)
        if not isinstance(value, str) or not value.strip().isdecimal():
            raise ValueError("stock must be a non-negative integer")
        return value.strip()

    @property
    def quantity(self) -> int:
        return int(self.stock)


class Inventory(BaseModel):
    inventory: list[Stock] = Field(default_factory=list)


# ---------- Read views ----------
class ProductStock(BaseModel):
    name: str
    available_product_no: str


# ---------- Responses ----------
class ResponseProduct(BaseModel):
    message: str | None = None
    inventory: list[Stock] | None = None
    product_stocks: list[ProductStock] | None = None


class ResponseError(BaseModel):
    message: str
