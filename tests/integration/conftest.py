import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from storefront.api.errors import register_error_handlers
from storefront.api.routes import (
    cart_router,
    category_router,
    order_router,
    product_router,
    review_router,
    user_router,
)


@pytest.fixture()
def client(storefront_domain):
    app = FastAPI()

    @app.middleware("http")
    async def domain_context(request: Request, call_next):
        with storefront_domain.domain_context():
            return await call_next(request)

    register_error_handlers(app)
    for router in (user_router, category_router, product_router, review_router, cart_router, order_router):
        app.include_router(router)
    return TestClient(app)


@pytest.fixture
def as_user():
    def _headers(user_id):
        return {"X-User-Id": str(user_id)}

    return _headers


@pytest.fixture
def admin_headers(admin, as_user):
    return as_user(admin)


@pytest.fixture
def customer_headers(customer, as_user):
    return as_user(customer)
