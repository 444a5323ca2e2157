"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's validation rules
and match the field names of the API's Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

# ---------- Accounts ----------


def unique_username(prefix: str = "lt") -> str:
    """Generate unique usernames like 'lt-a1b2c3d4'."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def valid_email(username: str) -> str:
    """Emails need exactly one @ and a dotted domain."""
    return f"{username}@{fake.free_email_domain()}"


def user_data(role: str | None = None) -> dict:
    """Generate RegisterUserRequest payload."""
    username = unique_username()
    payload = {
        "username": username,
        "email": valid_email(username),
        "first_name": fake.first_name()[:100],
        "last_name": fake.last_name()[:100],
    }
    if role:
        payload["role"] = role
    return payload


def address_data() -> dict:
    """Generate AddressRequest payload. Only city and country are required."""
    return {
        "street_number": str(random.randint(1, 400)),
        "street": fake.street_name()[:255],
        "district": fake.city_suffix(),
        "city": fake.city()[:100],
        "country": fake.country()[:100],
        "address_type": random.choice(["SHIPPING", "BILLING", "OTHER"]),
    }


# ---------- Catalogue ----------


def valid_sku(prefix: str = "LT") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


def product_data(stock: int | None = None) -> dict:
    """Generate CreateProductRequest payload with a two-decimal price."""
    word = fake.word().capitalize()
    return {
        "name": f"{word} {fake.word()} {uuid.uuid4().hex[:4]}",
        "sku": valid_sku("PROD"),
        "price": round(random.uniform(1.0, 250.0), 2),
        "stock_quantity": stock if stock is not None else random.randint(50, 500),
        "description": fake.sentence(nb_words=12),
    }


def search_params() -> dict:
    """Random product search query parameters."""
    params = {"page": 0, "size": random.choice([10, 20, 50])}
    if random.random() < 0.5:
        params["keyword"] = fake.word()[:3]
    if random.random() < 0.3:
        params["max_price"] = random.choice([25, 50, 100])
    return params


# ---------- Orders ----------


def order_data(shipping_address_id: str) -> dict:
    """Generate PlaceOrderRequest payload."""
    return {
        "shipping_address_id": shipping_address_id,
        "payment_method": random.choice(["COD", "CREDIT_CARD", "BANK_TRANSFER"]),
        "notes": fake.sentence(nb_words=6) if random.random() < 0.3 else None,
    }


def review_data() -> dict:
    return {"rating": random.randint(1, 5), "comment": fake.sentence(nb_words=10)}
