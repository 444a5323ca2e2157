"""Storefront load testing: Locust entry point.

Run specific scenarios with Locust's class selection.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Checkout contention on a single low-stock product:
    locust -f loadtests/locustfile.py ContentionUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py ShopperUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.shopping import STORE, ContentionUser, ShopperUser, seed_store  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request."""
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Stock the catalogue before any simulated user starts."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    seed_store(environment.host)
    print(f"[LOADTEST] Seeded {len(STORE.product_ids)} products and one scarce product")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Report what is left of the scarce product. Stock must never go negative."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    if not STORE.scarce_product_id:
        return
    try:
        resp = requests.get(f"{environment.host}/products/{STORE.scarce_product_id}", timeout=5)
        print(f"[LOADTEST] Scarce product stock left: {resp.json()['stock_quantity']}\n")
    except requests.RequestException as e:
        print(f"[LOADTEST] Could not fetch scarce product: {e}\n")
