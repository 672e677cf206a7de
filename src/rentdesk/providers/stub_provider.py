"""Stub property backend for offline/testing use."""

import copy
import random
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from rentdesk.core.exceptions import ApiConnectionError
from rentdesk.core.timezone import now_paris
from rentdesk.providers.api_client import EnvelopeBody


def _ok(data: Any) -> EnvelopeBody:
    return {"success": True, "data": data}


class StubPropertyApiClient:
    """
    In-memory backend with deterministic seed data.

    Dates are generated relative to the clock so the dashboard always has
    something overdue, a recent tenant and a recent payment to show. Call
    counts are recorded per method; fail_on() makes a method raise.
    """

    def __init__(
        self,
        seed: int = 42,
        clock: Callable[[], datetime] = now_paris,
        properties: Optional[list[dict]] = None,
        tenants: Optional[list[dict]] = None,
        bills: Optional[list[dict]] = None,
        expenses: Optional[list[dict]] = None,
        photos: Optional[dict[Any, list[dict]]] = None,
    ):
        self._rng = random.Random(seed)
        self._clock = clock
        self.calls: Counter = Counter()
        self.bill_filters: list[dict[str, Any]] = []
        self._failing: dict[str, Exception] = {}

        now = clock()
        self.properties = properties if properties is not None else self._seed_properties(now)
        self.tenants = tenants if tenants is not None else self._seed_tenants(now)
        self.bills = bills if bills is not None else self._seed_bills(now)
        self.expenses = expenses if expenses is not None else self._seed_expenses(now)
        self.photos = photos if photos is not None else self._seed_photos()

    def fail_on(self, method: str, error: Optional[Exception] = None) -> None:
        """Make ``method`` raise until recover() is called."""
        self._failing[method] = error or ApiConnectionError("Network error. Please check your connection.")

    def recover(self, method: Optional[str] = None) -> None:
        if method is None:
            self._failing.clear()
        else:
            self._failing.pop(method, None)

    async def list_properties(self) -> EnvelopeBody:
        self._record("list_properties")
        return _ok({"properties": copy.deepcopy(self.properties)})

    async def list_tenants(self) -> EnvelopeBody:
        self._record("list_tenants")
        return _ok({"tenants": copy.deepcopy(self.tenants)})

    async def list_bills(self, filters: Optional[dict[str, Any]] = None) -> EnvelopeBody:
        self._record("list_bills")
        filters = dict(filters or {})
        self.bill_filters.append(filters)

        bills = self.bills
        if filters.get("status"):
            bills = [b for b in bills if b.get("status") == filters["status"]]
        if filters.get("limit"):
            bills = bills[: int(filters["limit"])]
        return _ok({"bills": copy.deepcopy(bills)})

    async def get_bills_stats(self) -> EnvelopeBody:
        self._record("get_bills_stats")
        paid = [b for b in self.bills if b.get("status") == "PAID"]
        pending = [b for b in self.bills if b.get("status") == "PENDING"]
        overdue = [b for b in self.bills if b.get("status") == "OVERDUE"]
        return _ok(
            {
                "totalBills": len(self.bills),
                "paidBills": len(paid),
                "pendingBills": len(pending),
                "overdueBills": len(overdue),
                "totalAmount": sum(float(b.get("amount") or 0) for b in self.bills),
                "paidAmount": sum(float(b.get("amount") or 0) for b in paid),
                "pendingAmount": sum(float(b.get("amount") or 0) for b in pending),
                "overdueAmount": sum(float(b.get("amount") or 0) for b in overdue),
            }
        )

    async def list_expenses(self) -> EnvelopeBody:
        self._record("list_expenses")
        return _ok({"expenses": copy.deepcopy(self.expenses)})

    async def get_property_photos(self, property_id: Any) -> EnvelopeBody:
        self._record("get_property_photos")
        return _ok({"photos": copy.deepcopy(self.photos.get(property_id, []))})

    def _record(self, method: str) -> None:
        self.calls[method] += 1
        if method in self._failing:
            raise self._failing[method]

    def _seed_properties(self, now: datetime) -> list[dict]:
        cities = ["Paris", "Lyon", "Marseille", "Bordeaux"]
        properties = []
        for i in range(1, 4):
            properties.append(
                {
                    "id": i,
                    "title": f"Appartement {i}",
                    "address": f"{self._rng.randint(1, 120)} rue de la République",
                    "city": cities[self._rng.randrange(len(cities))],
                    "country": "France",
                    "rent": 650 + 150 * i,
                    "status": "ACTIVE" if i < 3 else "INACTIVE",
                    "created_at": (now - timedelta(days=300 - 50 * i)).isoformat(),
                }
            )
        return properties

    def _seed_tenants(self, now: datetime) -> list[dict]:
        return [
            {
                "id": 1,
                "full_name": "Camille Martin",
                "status": "ACTIVE",
                "rent_amount": 800,
                "property": {"id": 1, "title": "Appartement 1"},
                "created_at": (now - timedelta(days=200)).isoformat(),
                "move_in_date": (now - timedelta(days=200)).date().isoformat(),
            },
            {
                "id": 2,
                "full_name": "Louis Bernard",
                "status": "ACTIVE",
                "rent_amount": 950,
                "property": {"id": 2, "title": "Appartement 2"},
                "created_at": (now - timedelta(days=1)).isoformat(),
                "join_date": (now - timedelta(days=1)).isoformat(),
            },
        ]

    def _seed_bills(self, now: datetime) -> list[dict]:
        return [
            {
                "id": 1,
                "tenant_id": 1,
                "property_id": 1,
                "amount": 800,
                "status": "PENDING",
                "month": f"{now:%Y-%m}",
                "due_date": (now - timedelta(days=5)).date().isoformat(),
                "created_at": (now - timedelta(days=35)).isoformat(),
                "tenant": {"name": "Camille Martin"},
                "property": {"title": "Appartement 1"},
            },
            {
                "id": 2,
                "tenant_id": 2,
                "property_id": 2,
                "amount": 950,
                "status": "PAID",
                "due_date": (now + timedelta(days=10)).date().isoformat(),
                "payment_date": (now - timedelta(hours=3)).isoformat(),
                "created_at": (now - timedelta(days=2)).isoformat(),
                "tenant": {"name": "Louis Bernard"},
                "property": {"title": "Appartement 2"},
            },
            {
                "id": 3,
                "tenant_id": 1,
                "property_id": 1,
                "amount": 800,
                "status": "PENDING",
                "due_date": (now + timedelta(days=2)).date().isoformat(),
                "created_at": (now - timedelta(days=1)).isoformat(),
                "tenant": {"name": "Camille Martin"},
                "property": {"title": "Appartement 1"},
            },
        ]

    def _seed_expenses(self, now: datetime) -> list[dict]:
        categories = ["MAINTENANCE", "REPAIRS", "UTILITIES", "INSURANCE", "TAXES"]
        return [
            {
                "id": i,
                "property_id": 1 + i % 3,
                "category": categories[self._rng.randrange(len(categories))],
                "amount": round(50 + self._rng.random() * 450, 2),
                "status": "APPROVED" if i % 2 else "PENDING",
                "date": (now - timedelta(days=7 * i)).date().isoformat(),
                "created_at": (now - timedelta(days=7 * i)).isoformat(),
            }
            for i in range(1, 4)
        ]

    def _seed_photos(self) -> dict[Any, list[dict]]:
        return {
            1: [
                {"id": 10, "file_url": "/uploads/properties/1/front.jpg", "is_primary": False},
                {"id": 11, "file_url": "/uploads/properties/1/kitchen.jpg", "is_primary": True},
            ],
            2: [{"id": 20, "file_url": "properties/2/living.jpg", "is_primary": False}],
        }
