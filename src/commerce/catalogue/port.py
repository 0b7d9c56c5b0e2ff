"""Catalogue port (abstract interface).

Read-only lookups into the product catalogue. The catalogue itself is
maintained elsewhere; the commerce engines only need names, prices and
whether a product can still be sold.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: float
    active: bool = True
    category_id: str | None = None
    brand_id: str | None = None


@dataclass(frozen=True)
class Category:
    id: str
    name: str


@dataclass(frozen=True)
class Brand:
    id: str
    name: str


class CatalogueReader(ABC):
    """Abstract catalogue lookup interface.

    Every lookup raises ``commerce.errors.NotFound`` when the id is unknown.
    """

    @abstractmethod
    def get_product(self, product_id: str) -> Product: ...

    @abstractmethod
    def get_category(self, category_id: str) -> Category: ...

    @abstractmethod
    def get_brand(self, brand_id: str) -> Brand: ...
