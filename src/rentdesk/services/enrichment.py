"""
Enrichment of backend records with French presentation fields.

Every function returns a new dict (server record plus derived fields) and
never mutates its input.
"""

from datetime import datetime
from typing import Any, Optional

from rentdesk.core.formatting import (
    format_french_currency,
    format_french_date,
    get_current_french_datetime,
    get_days_until_due,
    is_overdue,
)
from rentdesk.domain.models import BillPriority, BillStatus

BILL_STATUS_FR = {
    BillStatus.PENDING.value: "En attente",
    BillStatus.PAID.value: "Payé",
    BillStatus.OVERDUE.value: "En retard",
    BillStatus.RECEIPT_SENT.value: "Reçu envoyé",
    BillStatus.CANCELLED.value: "Annulé",
}

EXPENSE_CATEGORY_FR = {
    "MAINTENANCE": "Maintenance",
    "REPAIRS": "Réparations",
    "UTILITIES": "Services publics",
    "INSURANCE": "Assurance",
    "TAXES": "Taxes",
    "ADMINISTRATIVE": "Administratif",
    "OTHER": "Autre",
}


def _date_fr(value: Any) -> Optional[str]:
    return format_french_date(value) if value else None


def _currency_or_none(value: Any) -> Optional[str]:
    return format_french_currency(value) if value else None


def get_bill_status_french(status: Optional[str]) -> Optional[str]:
    """French label for a bill status; unknown statuses pass through."""
    return BILL_STATUS_FR.get(status, status)


def get_bill_priority(status: Optional[str], overdue: bool, days_until_due: Optional[int]) -> str:
    """
    Ordered cascade: paid, then overdue, then days left.

    A paid bill is low priority even when its due date has passed.
    """
    if status == BillStatus.PAID.value:
        return BillPriority.LOW.value
    if overdue:
        return BillPriority.CRITICAL.value
    if days_until_due is None:
        return BillPriority.LOW.value
    if days_until_due <= 3:
        return BillPriority.HIGH.value
    if days_until_due <= 7:
        return BillPriority.MEDIUM.value
    return BillPriority.LOW.value


def get_expense_category_french(category: Optional[str]) -> Optional[str]:
    return EXPENSE_CATEGORY_FR.get(category, category)


def format_address(record: dict[str, Any]) -> str:
    """'address, city, country' from whichever parts are present."""
    parts = [record.get(k) for k in ("address", "city", "country")]
    return ", ".join(p for p in parts if p) or "Adresse non spécifiée"


def normalize_photo_url(photo_url: Optional[str], backend_base_url: str) -> Optional[str]:
    """
    Make a stored photo path displayable.

    Absolute URLs pass through; /uploads paths are joined to the backend
    origin; any other relative path is placed under <origin>/uploads/.
    """
    if not photo_url:
        return None
    if photo_url.startswith(("http://", "https://")):
        return photo_url
    if photo_url.startswith("/uploads"):
        return f"{backend_base_url}{photo_url}"
    separator = "" if photo_url.startswith("/") else "/"
    return f"{backend_base_url}/uploads{separator}{photo_url}"


def enrich_photo(photo: dict[str, Any], backend_base_url: str) -> dict[str, Any]:
    return {
        **photo,
        "display_url": normalize_photo_url(photo.get("file_url"), backend_base_url),
        "created_at_fr": format_french_date(photo.get("created_at")),
        "updated_at_fr": _date_fr(photo.get("updated_at")),
    }


def enrich_property(record: dict[str, Any], photos: list[dict[str, Any]]) -> dict[str, Any]:
    """Property plus its (already enriched) photos and display fields."""
    primary = next((p for p in photos if p.get("is_primary")), photos[0] if photos else None)
    active = record.get("status") == "ACTIVE"
    return {
        **record,
        "photos": photos,
        "primary_photo": primary,
        "created_at_fr": format_french_date(record.get("created_at")),
        "updated_at_fr": _date_fr(record.get("updated_at")),
        "rent_formatted": format_french_currency(record.get("rent") or record.get("monthly_rent") or 0),
        "is_active": active,
        "status_fr": "Actif" if active else "Inactif",
        "display_title": record.get("title") or record.get("name") or "Propriété sans nom",
        "display_address": format_address(record),
        "photo_count": len(photos),
        "has_photos": len(photos) > 0,
    }


def enrich_tenant(record: dict[str, Any]) -> dict[str, Any]:
    active = record.get("status") == "ACTIVE" or record.get("is_active") is True
    return {
        **record,
        "created_at_fr": format_french_date(record.get("created_at")),
        "updated_at_fr": _date_fr(record.get("updated_at")),
        "move_in_date_fr": _date_fr(record.get("move_in_date")),
        "move_out_date_fr": _date_fr(record.get("move_out_date")),
        "rent_amount_formatted": _currency_or_none(record.get("rent_amount")),
        "is_active": active,
        "status_fr": "Actif" if active else "Inactif",
        "display_name": record.get("fullName") or record.get("full_name") or record.get("name") or "Locataire",
    }


def enrich_bill(record: dict[str, Any], now: Optional[datetime] = None) -> dict[str, Any]:
    """Bill plus overdue analysis computed on calendar days."""
    due_date = record.get("due_date")
    overdue = is_overdue(due_date, now)
    days_until_due = get_days_until_due(due_date, now)
    tenant = record.get("tenant") or {}
    prop = record.get("property") or {}
    return {
        **record,
        "created_at_fr": format_french_date(record.get("created_at")),
        "due_date_fr": format_french_date(due_date),
        "payment_date_fr": _date_fr(record.get("payment_date")),
        "amount_formatted": format_french_currency(record.get("amount") or record.get("total_amount") or 0),
        "rent_amount_formatted": _currency_or_none(record.get("rent_amount")),
        "charges_formatted": _currency_or_none(record.get("charges")),
        "total_amount_formatted": format_french_currency(record.get("total_amount") or record.get("amount") or 0),
        "is_overdue": overdue,
        "days_until_due": days_until_due,
        "status_fr": get_bill_status_french(record.get("status")),
        "priority": get_bill_priority(record.get("status"), overdue, days_until_due),
        "tenant_display_name": tenant.get("name") or tenant.get("fullName") or "Locataire",
        "property_display_name": prop.get("title") or prop.get("name") or "Propriété",
    }


def _bills_label(count: int, suffix: str = "", agree: bool = False) -> str:
    plural = "s" if count > 1 else ""
    label = f"{count} facture{plural}"
    if suffix:
        label += f" {suffix}{plural if agree else ''}"
    return label


def enrich_bills_stats(stats: dict[str, Any], now: Optional[datetime] = None) -> dict[str, Any]:
    total = stats.get("totalBills") or 0
    paid = stats.get("paidBills") or 0
    pending = stats.get("pendingBills") or 0
    overdue = stats.get("overdueBills") or 0
    return {
        **stats,
        "totalAmount_formatted": format_french_currency(stats.get("totalAmount") or 0),
        "paidAmount_formatted": format_french_currency(stats.get("paidAmount") or 0),
        "pendingAmount_formatted": format_french_currency(stats.get("pendingAmount") or 0),
        "overdueAmount_formatted": format_french_currency(stats.get("overdueAmount") or 0),
        "totalBills_fr": _bills_label(total),
        "paidBills_fr": _bills_label(paid, "payée", agree=True),
        "pendingBills_fr": _bills_label(pending, "en attente"),
        "overdueBills_fr": _bills_label(overdue, "en retard"),
        "last_updated": get_current_french_datetime(now),
        "last_updated_timestamp": now.isoformat() if now else None,
    }


def enrich_expense(record: dict[str, Any]) -> dict[str, Any]:
    return {
        **record,
        "created_at_fr": format_french_date(record.get("created_at")),
        "date_fr": _date_fr(record.get("date")),
        "amount_formatted": format_french_currency(record.get("amount") or 0),
        "category_fr": get_expense_category_french(record.get("category")),
        "status_fr": "Approuvé" if record.get("status") == "APPROVED" else "En attente",
    }
