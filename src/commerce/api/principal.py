"""Resolves the acting customer for cart and order routes.

Credential checks happen upstream; by the time a request lands here the
gateway has put the authenticated username in ``X-Username``.
"""

from fastapi import Header

from commerce.directory import get_directory
from commerce.directory.port import Customer
from commerce.errors import NotFound, Unauthenticated


async def current_customer(x_username: str | None = Header(default=None)) -> Customer:
    if not x_username:
        raise Unauthenticated("Authentication required")
    try:
        return get_directory().find_user_by_username(x_username)
    except NotFound:
        raise Unauthenticated("User not found", {"username": x_username}) from None
