"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state. State tracks the ids returned
by creation endpoints so follow-up requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks a single simulated shopper."""

    user_id: str | None = None
    address_id: str | None = None
    order_ids: list[str] = field(default_factory=list)
    ordered_product_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"X-User-Id": self.user_id} if self.user_id else {}


@dataclass
class StoreState:
    """Products shared by every simulated user of one Locust process."""

    admin_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    scarce_product_id: str | None = None
