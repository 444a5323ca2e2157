"""Storefront load test scenarios.

``seed_store`` registers an admin and stocks the catalogue once per test run.
The journeys then share those products:

- ``BrowsingJourney`` searches and reads products without buying.
- ``CheckoutJourney`` registers, fills a cart from the catalogue and places
  an order, occasionally cancelling it.
- ``ScarceStockJourney`` has every user race for the same low-stock product,
  which exercises the per-product locks around order placement. Rejections
  for insufficient stock are expected and counted as successes.
"""

import random

import requests
from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import address_data, order_data, product_data, review_data, search_params, user_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState, StoreState

STORE = StoreState()

CATALOGUE_SIZE = 25
SCARCE_STOCK = 20


def seed_store(host: str) -> StoreState:
    """Create the admin and the shared products through the public API."""
    session = requests.Session()

    resp = session.post(f"{host}/users", json=user_data(role="ADMIN"), timeout=10)
    resp.raise_for_status()
    STORE.admin_id = resp.json()["user_id"]
    headers = {"X-User-Id": STORE.admin_id}

    for _ in range(CATALOGUE_SIZE):
        resp = session.post(f"{host}/products", json=product_data(), headers=headers, timeout=10)
        resp.raise_for_status()
        STORE.product_ids.append(resp.json()["id"])

    resp = session.post(f"{host}/products", json=product_data(stock=SCARCE_STOCK), headers=headers, timeout=10)
    resp.raise_for_status()
    STORE.scarce_product_id = resp.json()["id"]
    return STORE


class _ShopperJourney(SequentialTaskSet):
    """Registers a fresh shopper with one address before its tasks run."""

    def on_start(self):
        self.state = ShopperState()
        with self.client.post("/users", json=user_data(), catch_response=True, name="POST /users") as resp:
            if resp.status_code != 201:
                resp.failure(f"Register failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()
                return
            self.state.user_id = resp.json()["user_id"]

        with self.client.post(
            "/users/me/addresses",
            json=address_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /users/me/addresses",
        ) as resp:
            if resp.status_code == 201:
                self.state.address_id = resp.json()["id"]
            else:
                resp.failure(f"Add address failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    def add_to_cart(self, product_id, quantity):
        with self.client.post(
            "/cart/items",
            json={"product_id": product_id, "quantity": quantity},
            headers=self.state.headers,
            catch_response=True,
            name="POST /cart/items",
        ) as resp:
            if resp.status_code == 400:
                # Out of stock for this shopper; keep browsing.
                resp.success()
            elif resp.status_code != 200:
                resp.failure(f"Add to cart failed: {resp.status_code} - {extract_error_detail(resp)}")


class BrowsingJourney(SequentialTaskSet):
    """Search -> Read product -> Read reviews."""

    @task
    def search(self):
        with self.client.get("/products", params=search_params(), catch_response=True, name="GET /products") as resp:
            if resp.status_code != 200:
                resp.failure(f"Search failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def read_product(self):
        if not STORE.product_ids:
            self.interrupt()
        product_id = random.choice(STORE.product_ids)
        self.client.get(f"/products/{product_id}", name="GET /products/{id}")
        self.client.get(f"/products/{product_id}/reviews", name="GET /products/{id}/reviews")

    @task
    def done(self):
        self.interrupt()


class CheckoutJourney(_ShopperJourney):
    """Register -> Fill cart -> Place order -> Review -> (sometimes) Cancel."""

    @task
    def fill_cart(self):
        for product_id in random.sample(STORE.product_ids, k=min(3, len(STORE.product_ids))):
            self.add_to_cart(product_id, random.randint(1, 3))

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json=order_data(self.state.address_id),
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                order = resp.json()
                self.state.order_ids.append(order["id"])
                self.state.ordered_product_ids = [line["product_id"] for line in order["lines"]]
            else:
                resp.failure(f"Place order failed: {resp.status_code} - {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def review_purchase(self):
        product_id = random.choice(self.state.ordered_product_ids)
        with self.client.post(
            f"/products/{product_id}/reviews",
            json=review_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /products/{id}/reviews",
        ) as resp:
            if resp.status_code != 201:
                resp.failure(f"Review failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def maybe_cancel(self):
        if random.random() < 0.25:
            with self.client.put(
                f"/orders/{self.state.order_ids[-1]}/cancel",
                headers=self.state.headers,
                catch_response=True,
                name="PUT /orders/{id}/cancel",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Cancel failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ScarceStockJourney(_ShopperJourney):
    """Every shopper tries to buy the same low-stock product."""

    @task
    def grab_scarce_product(self):
        self.add_to_cart(STORE.scarce_product_id, 1)

    @task
    def place_order(self):
        with self.client.post(
            "/orders",
            json={"shipping_address_id": self.state.address_id},
            headers=self.state.headers,
            catch_response=True,
            name="POST /orders (scarce)",
        ) as resp:
            if resp.status_code in (201, 400):
                resp.success()
            else:
                resp.failure(f"Scarce checkout failed: {resp.status_code} - {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    """Mostly browsing, with a steady share of checkouts."""

    wait_time = between(1, 3)
    tasks = {BrowsingJourney: 6, CheckoutJourney: 3}


class ContentionUser(HttpUser):
    """Shoppers racing for the last units of one product."""

    wait_time = between(0.1, 0.5)
    tasks = [ScarceStockJourney]
