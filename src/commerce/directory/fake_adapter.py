"""In-memory customer directory for development and testing."""

from commerce.directory.port import Customer, CustomerDirectory
from commerce.errors import NotFound


class InMemoryDirectory(CustomerDirectory):
    def __init__(self) -> None:
        self.customers: dict[str, Customer] = {}

    def register(self, customer_id: str, username: str, email: str | None = None) -> Customer:
        customer = Customer(id=str(customer_id), username=username, email=email)
        self.customers[customer.id] = customer
        return customer

    def find_user_by_id(self, customer_id: str) -> Customer:
        try:
            return self.customers[str(customer_id)]
        except KeyError:
            raise NotFound("User not found", {"customer_id": str(customer_id)}) from None

    def find_user_by_username(self, username: str) -> Customer:
        customer = next((c for c in self.customers.values() if c.username == username), None)
        if customer is None:
            raise NotFound("User not found", {"username": username})
        return customer

    def reset(self) -> None:
        self.customers.clear()
