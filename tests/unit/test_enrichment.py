"""
Unit tests for record enrichment.

Tests cover:
- Bill priority cascade
- Photo URL normalization
- Property, bill, stats and expense enrichment
- Inputs are never mutated
"""

import copy

import pytest

from rentdesk.services import enrichment
from rentdesk.services.enrichment import (
    enrich_bill,
    enrich_bills_stats,
    enrich_expense,
    enrich_property,
    format_address,
    get_bill_priority,
    get_bill_status_french,
    get_expense_category_french,
    normalize_photo_url,
)

from tests.conftest import make_bill

BACKEND = "http://localhost:4002"


# =============================================================================
# PRIORITY CASCADE TESTS
# =============================================================================


class TestBillPriority:
    """Tests for the paid > overdue > days-left cascade."""

    def test_paid_is_low_even_when_past_due(self):
        assert get_bill_priority("PAID", True, -30) == "low"

    def test_overdue_is_critical(self):
        assert get_bill_priority("PENDING", True, -1) == "critical"

    def test_unknown_due_date_is_low(self):
        assert get_bill_priority("PENDING", False, None) == "low"

    @pytest.mark.parametrize(
        "days,expected",
        [(0, "high"), (3, "high"), (4, "medium"), (7, "medium"), (8, "low"), (60, "low")],
    )
    def test_days_until_due_thresholds(self, days, expected):
        assert get_bill_priority("PENDING", False, days) == expected


# =============================================================================
# PHOTO URL TESTS
# =============================================================================


class TestNormalizePhotoUrl:
    """Tests for making stored photo paths displayable."""

    @pytest.mark.parametrize(
        "stored,expected",
        [
            ("https://cdn.example.com/a.jpg", "https://cdn.example.com/a.jpg"),
            ("http://cdn.example.com/a.jpg", "http://cdn.example.com/a.jpg"),
            ("/uploads/properties/1/a.jpg", f"{BACKEND}/uploads/properties/1/a.jpg"),
            ("properties/1/a.jpg", f"{BACKEND}/uploads/properties/1/a.jpg"),
            ("/photos/a.jpg", f"{BACKEND}/uploads/photos/a.jpg"),
        ],
    )
    def test_normalization(self, stored, expected):
        assert normalize_photo_url(stored, BACKEND) == expected

    @pytest.mark.parametrize("stored", [None, ""])
    def test_empty_url_is_none(self, stored):
        assert normalize_photo_url(stored, BACKEND) is None


# =============================================================================
# LABEL TESTS
# =============================================================================


class TestLabels:
    def test_bill_status_labels(self):
        assert get_bill_status_french("PENDING") == "En attente"
        assert get_bill_status_french("RECEIPT_SENT") == "Reçu envoyé"
        assert get_bill_status_french("DISPUTED") == "DISPUTED"

    def test_expense_category_labels(self):
        assert get_expense_category_french("REPAIRS") == "Réparations"
        assert get_expense_category_french("GARDENING") == "GARDENING"

    def test_format_address(self):
        assert format_address({"address": "1 rue Lepic", "city": "Paris", "country": "France"}) == (
            "1 rue Lepic, Paris, France"
        )
        assert format_address({"address": "1 rue Lepic", "city": None}) == "1 rue Lepic"
        assert format_address({}) == "Adresse non spécifiée"


# =============================================================================
# ENRICHMENT TESTS
# =============================================================================


class TestEnrichBill:
    """Tests for bill enrichment."""

    def test_overdue_bill(self, fixed_now):
        """
        GIVEN a pending bill due 2024-01-01 and today 2024-01-10
        WHEN enriched
        THEN it is overdue by 9 days with critical priority
        """
        bill = make_bill(1, "2024-01-01", amount=100)

        enriched = enrich_bill(bill, fixed_now)

        assert enriched["is_overdue"] is True
        assert enriched["days_until_due"] == -9
        assert enriched["priority"] == "critical"
        assert enriched["status_fr"] == "En attente"
        assert enriched["amount_formatted"] == "100,00\u00a0€"
        assert enriched["due_date_fr"] == "1 janvier 2024"
        assert enriched["tenant_display_name"] == "Alice Dupont"
        assert enriched["property_display_name"] == "Propriété"

    def test_bill_due_today(self, fixed_now):
        enriched = enrich_bill(make_bill(2, "2024-01-10"), fixed_now)

        assert enriched["is_overdue"] is False
        assert enriched["days_until_due"] == 0
        assert enriched["priority"] == "high"

    def test_input_not_mutated(self, fixed_now):
        bill = make_bill(3, "2024-01-01")
        original = copy.deepcopy(bill)

        enrich_bill(bill, fixed_now)

        assert bill == original


class TestEnrichProperty:
    """Tests for property enrichment with photos."""

    def test_primary_photo_preferred(self):
        photos = [{"id": 1, "is_primary": False}, {"id": 2, "is_primary": True}]

        enriched = enrich_property({"id": 1, "title": "Loft", "status": "ACTIVE", "rent": 900}, photos)

        assert enriched["primary_photo"]["id"] == 2
        assert enriched["photo_count"] == 2
        assert enriched["has_photos"] is True
        assert enriched["is_active"] is True
        assert enriched["status_fr"] == "Actif"
        assert enriched["display_title"] == "Loft"

    def test_first_photo_when_none_primary(self):
        photos = [{"id": 5, "is_primary": False}, {"id": 6}]

        assert enrich_property({"id": 1}, photos)["primary_photo"]["id"] == 5

    def test_no_photos(self):
        enriched = enrich_property({"id": 1, "status": "INACTIVE"}, [])

        assert enriched["primary_photo"] is None
        assert enriched["has_photos"] is False
        assert enriched["status_fr"] == "Inactif"
        assert enriched["display_title"] == "Propriété sans nom"

    def test_photo_display_url(self):
        photo = enrichment.enrich_photo({"id": 1, "file_url": "a.jpg", "created_at": "2024-01-02"}, BACKEND)

        assert photo["display_url"] == f"{BACKEND}/uploads/a.jpg"
        assert photo["created_at_fr"] == "2 janvier 2024"


class TestEnrichStats:
    """Tests for bill statistics labels."""

    def test_plural_labels(self, fixed_now):
        stats = {"totalBills": 3, "paidBills": 1, "pendingBills": 2, "overdueBills": 0, "paidAmount": 950}

        enriched = enrich_bills_stats(stats, fixed_now)

        assert enriched["totalBills_fr"] == "3 factures"
        assert enriched["paidBills_fr"] == "1 facture payée"
        assert enriched["pendingBills_fr"] == "2 factures en attente"
        assert enriched["overdueBills_fr"] == "0 facture en retard"
        assert enriched["paidAmount_formatted"] == "950,00\u00a0€"
        assert enriched["last_updated"] == "10 janvier 2024 à 10:00"

    def test_paid_label_agrees_in_plural(self, fixed_now):
        assert enrich_bills_stats({"paidBills": 2}, fixed_now)["paidBills_fr"] == "2 factures payées"


class TestEnrichExpense:
    def test_expense_labels(self):
        enriched = enrich_expense({"id": 1, "category": "UTILITIES", "amount": 42.5, "status": "APPROVED"})

        assert enriched["category_fr"] == "Services publics"
        assert enriched["status_fr"] == "Approuvé"
        assert enriched["amount_formatted"] == "42,50\u00a0€"
        assert enriched["date_fr"] is None
