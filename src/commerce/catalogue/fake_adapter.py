"""In-memory catalogue for development and testing."""

from commerce.catalogue.port import Brand, CatalogueReader, Category, Product
from commerce.errors import NotFound


class InMemoryCatalogue(CatalogueReader):
    """Catalogue backed by plain dicts, seeded through the ``add_*`` helpers."""

    def __init__(self) -> None:
        self.products: dict[str, Product] = {}
        self.categories: dict[str, Category] = {}
        self.brands: dict[str, Brand] = {}

    def add_product(
        self,
        product_id: str,
        name: str,
        price: float,
        active: bool = True,
        category_id: str | None = None,
        brand_id: str | None = None,
    ) -> Product:
        product = Product(
            id=str(product_id),
            name=name,
            price=price,
            active=active,
            category_id=category_id,
            brand_id=brand_id,
        )
        self.products[product.id] = product
        return product

    def add_category(self, category_id: str, name: str) -> Category:
        category = Category(id=str(category_id), name=name)
        self.categories[category.id] = category
        return category

    def add_brand(self, brand_id: str, name: str) -> Brand:
        brand = Brand(id=str(brand_id), name=name)
        self.brands[brand.id] = brand
        return brand

    def get_product(self, product_id: str) -> Product:
        try:
            return self.products[str(product_id)]
        except KeyError:
            raise NotFound("Product not found", {"product_id": str(product_id)}) from None

    def get_category(self, category_id: str) -> Category:
        try:
            return self.categories[str(category_id)]
        except KeyError:
            raise NotFound("Category not found", {"category_id": str(category_id)}) from None

    def get_brand(self, brand_id: str) -> Brand:
        try:
            return self.brands[str(brand_id)]
        except KeyError:
            raise NotFound("Brand not found", {"brand_id": str(brand_id)}) from None

    def reset(self) -> None:
        self.products.clear()
        self.categories.clear()
        self.brands.clear()
