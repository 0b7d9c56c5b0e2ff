"""Customer directory port — resolves the acting principal."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Customer:
    id: str
    username: str
    email: str | None = None


class CustomerDirectory(ABC):
    """Abstract customer lookup. Unknown customers raise ``NotFound``."""

    @abstractmethod
    def find_user_by_id(self, customer_id: str) -> Customer: ...

    @abstractmethod
    def find_user_by_username(self, username: str) -> Customer: ...
