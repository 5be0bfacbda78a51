"""Record types for grants, tender sites, philanthropic contacts, and strategy."""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any


def new_record_id() -> str:
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def coerce_amount(value: Any) -> float:
    """Return a finite, non-negative number for ``value``, or 0 when it is not one."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def coerce_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return value is True


def parse_deadline(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


@dataclass(frozen=True)
class FundingGrant:
    id: str
    funder: str
    fund_name: str = ""
    is_small_fund: bool = False
    status: str = ""
    assigned_to: str = ""
    project: str = ""
    details: str = ""
    amount: float = 0.0
    deadline: str = ""
    prep_month: str = ""
    deadline_month: str = ""
    delivery_dates: str = ""
    action: str = ""
    website: str = ""
    created_at: str = ""

    @property
    def deadline_date(self) -> date | None:
        return parse_deadline(self.deadline)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "funder": self.funder,
            "fundName": self.fund_name,
            "isSmallFund": self.is_small_fund,
            "smtStatus": self.status,
            "assignedTo": self.assigned_to,
            "relevantWCAProject": self.project,
            "details": self.details,
            "amount": self.amount,
            "dateForFunding": self.deadline,
            "prepMonth": self.prep_month,
            "deadlineMonth": self.deadline_month,
            "deliveryDates": self.delivery_dates,
            "action": self.action,
            "website": self.website,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FundingGrant:
        return cls(
            id=_text(data["id"]),
            funder=_text(data.get("funder")),
            fund_name=_text(data.get("fundName")),
            is_small_fund=coerce_flag(data.get("isSmallFund")),
            status=_text(data.get("smtStatus")),
            assigned_to=_text(data.get("assignedTo")),
            project=_text(data.get("relevantWCAProject")),
            details=_text(data.get("details")),
            amount=coerce_amount(data.get("amount")),
            deadline=_text(data.get("dateForFunding")),
            prep_month=_text(data.get("prepMonth")),
            deadline_month=_text(data.get("deadlineMonth")),
            delivery_dates=_text(data.get("deliveryDates")),
            action=_text(data.get("action")),
            website=_text(data.get("website")),
            created_at=_text(data.get("createdAt")),
        )


@dataclass(frozen=True)
class TenderSite:
    """Procurement portal login. Passwords are never kept."""

    id: str
    name: str
    login: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "login": self.login}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TenderSite:
        return cls(
            id=_text(data["id"]),
            name=_text(data.get("name")),
            login=_text(data.get("login")),
        )


@dataclass(frozen=True)
class PhilanthropicSite:
    id: str
    organisation: str
    date_added: str = ""
    website: str = ""
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "dateAdded": self.date_added,
            "organisation": self.organisation,
            "website": self.website,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PhilanthropicSite:
        return cls(
            id=_text(data["id"]),
            organisation=_text(data.get("organisation")),
            date_added=_text(data.get("dateAdded")),
            website=_text(data.get("website")),
            notes=_text(data.get("notes")),
        )


@dataclass(frozen=True)
class StrategyItem:
    id: str
    fund: str
    details: str = ""
    comments: str = ""
    further_info: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fund": self.fund,
            "details": self.details,
            "comments": self.comments,
            "furtherInfo": self.further_info,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StrategyItem:
        return cls(
            id=_text(data["id"]),
            fund=_text(data.get("fund")),
            details=_text(data.get("details")),
            comments=_text(data.get("comments")),
            further_info=_text(data.get("furtherInfo")),
        )
