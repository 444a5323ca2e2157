import os
from itertools import count
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_domain(request):
    """Initialize the storefront domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront_domain)

    yield

    drop_db(storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(storefront_domain):
    """Push domain context before each test, cleanup after."""
    ctx = storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    from storefront.notifications import reset_email_channel
    from storefront.order.guard import reset_inventory_guard

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()

    reset_email_channel()
    reset_inventory_guard()
    ctx.pop()


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
_sequence = count(1)


@pytest.fixture
def fake_email():
    from storefront.notifications import set_email_channel
    from storefront.notifications.fake_email import FakeEmailAdapter

    channel = FakeEmailAdapter()
    set_email_channel(channel)
    return channel


@pytest.fixture
def register_user():
    from protean import current_domain

    from storefront.accounts.registration import RegisterUser

    def _register(username=None, role=None, email=None, **extra):
        username = username or f"user{next(_sequence)}"
        return current_domain.process(
            RegisterUser(username=username, email=email or f"{username}@example.com", role=role, **extra),
            asynchronous=False,
        )

    return _register


@pytest.fixture
def create_product():
    from protean import current_domain

    from storefront.catalogue.management import CreateProduct

    def _create(name="Ceramic Mug", price=12.5, stock=10, sku=None, category_id=None):
        return current_domain.process(
            CreateProduct(
                name=name,
                sku=sku or f"SKU-{next(_sequence):04d}",
                price=price,
                stock_quantity=stock,
                category_id=category_id,
            ),
            asynchronous=False,
        )

    return _create


@pytest.fixture
def add_address():
    from protean import current_domain

    from storefront.accounts.addresses import AddAddress

    def _add(user_id, city="Hanoi", country="Vietnam", **parts):
        parts.setdefault("street", "Trang Tien")
        parts.setdefault("street_number", "12")
        return current_domain.process(
            AddAddress(user_id=user_id, city=city, country=country, **parts),
            asynchronous=False,
        )

    return _add


@pytest.fixture
def add_to_cart():
    from protean import current_domain

    from storefront.cart.items import AddToCart

    def _add(user_id, product_id, quantity=1):
        return current_domain.process(
            AddToCart(user_id=user_id, product_id=product_id, quantity=quantity),
            asynchronous=False,
        )

    return _add


@pytest.fixture
def customer(register_user):
    return register_user(username="jane", first_name="Jane", last_name="Doe")


@pytest.fixture
def admin(register_user):
    return register_user(username="root", role="ADMIN")


@pytest.fixture
def shipping_address(customer, add_address):
    return add_address(customer)
