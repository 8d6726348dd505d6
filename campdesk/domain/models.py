"""SQLAlchemy models for staff scheduling and seasonal rate cards.

Instances are built from backend JSON payloads and mostly live in memory for
one fetch window; the same classes back the optional local snapshot store.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, relationship

from campdesk.data_io import clock_string, day_string, parse_day, parse_timestamp

from .enums import ShiftStatus


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def _as_float(value, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_int(value) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class StaffRole(Base):
    """Role a shift can be scheduled under (front desk, grounds, ...)."""

    __tablename__ = "staff_roles"

    role_id = Column(String(64), primary_key=True, name="id")
    campground_id = Column(String(64), nullable=True)
    code = Column(String(50), nullable=True)
    name = Column(String(100), nullable=False)

    @classmethod
    def from_payload(cls, payload: dict) -> "StaffRole":
        return cls(role_id=payload.get("id"), code=payload.get("code"), name=payload.get("name") or "")

    def __repr__(self) -> str:
        return f"<StaffRole(id={self.role_id}, code='{self.code}', name='{self.name}')>"


class StaffMember(Base):
    """Campground team member who can be assigned shifts."""

    __tablename__ = "staff_members"

    member_id = Column(String(64), primary_key=True, name="id")
    campground_id = Column(String(64), nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)

    @classmethod
    def from_payload(cls, payload: dict) -> "StaffMember":
        """
        Build a member from the campground members endpoint.

        The endpoint returns memberships that nest the person under ``user``
        and name the id ``userId``; flat records are accepted as well.
        """
        user = payload.get("user") or {}
        return cls(
            member_id=payload.get("userId") or payload.get("id"),
            first_name=user.get("firstName") or payload.get("firstName"),
            last_name=user.get("lastName") or payload.get("lastName"),
            email=user.get("email") or payload.get("email"),
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def __repr__(self) -> str:
        return f"<StaffMember(id={self.member_id}, name='{self.full_name}')>"


class Shift(Base):
    """A scheduled work assignment for one staff member on one day."""

    __tablename__ = "shifts"

    shift_id = Column(String(64), primary_key=True, name="id")
    campground_id = Column(String(64), nullable=True, index=True)
    user_id = Column(String(64), nullable=True)
    shift_date = Column(Date, nullable=True, index=True)
    start_time = Column(DateTime, nullable=True)  # naive UTC
    end_time = Column(DateTime, nullable=True)  # naive UTC
    role = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default=ShiftStatus.SCHEDULED.value)
    scheduled_minutes = Column(Integer, nullable=True)
    actual_minutes = Column(Integer, nullable=True)

    @classmethod
    def from_payload(cls, payload: dict, campground_id: str | None = None) -> "Shift":
        """
        Build a shift from its JSON representation.

        ``startTime``/``endTime`` may be full ISO date-times or ``HH:MM``
        strings anchored on ``shiftDate``. Unparseable values become None
        rather than raising.
        """
        day = parse_day(payload.get("shiftDate"))
        return cls(
            shift_id=payload.get("id"),
            campground_id=payload.get("campgroundId") or campground_id,
            user_id=payload.get("userId"),
            shift_date=day,
            start_time=parse_timestamp(payload.get("startTime"), day),
            end_time=parse_timestamp(payload.get("endTime"), day),
            role=payload.get("role"),
            status=payload.get("status") or ShiftStatus.SCHEDULED.value,
            scheduled_minutes=_as_int(payload.get("scheduledMinutes")),
            actual_minutes=_as_int(payload.get("actualMinutes")),
        )

    def to_payload(self) -> dict:
        return {
            "id": self.shift_id,
            "userId": self.user_id,
            "shiftDate": day_string(self.shift_date),
            "startTime": clock_string(self.start_time),
            "endTime": clock_string(self.end_time),
            "role": self.role,
            "status": self.status,
            "scheduledMinutes": self.scheduled_minutes,
            "actualMinutes": self.actual_minutes,
        }

    def __repr__(self) -> str:
        return (
            f"<Shift(id={self.shift_id}, user={self.user_id}, date={self.shift_date}, "
            f"{clock_string(self.start_time)}-{clock_string(self.end_time)}, status={self.status})>"
        )


class SwapRequest(Base):
    """Request to hand a shift over to another team member."""

    __tablename__ = "swap_requests"

    swap_id = Column(String(64), primary_key=True, name="id")
    campground_id = Column(String(64), nullable=True)
    status = Column(String(30), nullable=False)
    requester_id = Column(String(64), nullable=True)
    requester_name = Column(String(200), nullable=True)
    recipient_id = Column(String(64), nullable=True)
    recipient_name = Column(String(200), nullable=True)
    manager_id = Column(String(64), nullable=True)
    requester_shift_id = Column(String(64), nullable=True)
    requester_shift_date = Column(Date, nullable=True)
    requester_note = Column(Text, nullable=True)
    recipient_note = Column(Text, nullable=True)
    manager_note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=True)

    @classmethod
    def from_payload(cls, payload: dict) -> "SwapRequest":
        requester = payload.get("requester") or {}
        recipient = payload.get("recipient") or {}
        manager = payload.get("manager") or {}
        shift = payload.get("requesterShift") or {}
        return cls(
            swap_id=payload.get("id"),
            status=payload.get("status") or "",
            requester_id=requester.get("id"),
            requester_name=_person_name(requester),
            recipient_id=recipient.get("id"),
            recipient_name=_person_name(recipient),
            manager_id=manager.get("id"),
            requester_shift_id=shift.get("id"),
            requester_shift_date=parse_day(shift.get("shiftDate")),
            requester_note=payload.get("requesterNote"),
            recipient_note=payload.get("recipientNote"),
            manager_note=payload.get("managerNote"),
            created_at=parse_timestamp(payload.get("createdAt")),
        )

    def __repr__(self) -> str:
        return f"<SwapRequest(id={self.swap_id}, status={self.status}, {self.requester_id}->{self.recipient_id})>"


def _person_name(person: dict) -> Optional[str]:
    name = f"{person.get('firstName') or ''} {person.get('lastName') or ''}".strip()
    return name or person.get("email")


class RateCard(Base):
    """Seasonal pricing configuration: base rate plus discount and incentive rules."""

    __tablename__ = "rate_cards"

    rate_card_id = Column(String(64), primary_key=True, name="id")
    campground_id = Column(String(64), nullable=True, index=True)
    name = Column(String(200), nullable=False)
    season_year = Column(Integer, nullable=True, index=True)
    base_rate = Column(Float, nullable=False, default=0.0)
    billing_frequency = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    included_utilities = Column(JSON, nullable=True)
    season_start_date = Column(Date, nullable=True)
    season_end_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_default = Column(Boolean, nullable=False, default=False)

    # Stored list order matters: the pricing preview applies discounts in it.
    discounts = relationship(
        "Discount", back_populates="rate_card", order_by="Discount.position", cascade="all, delete-orphan"
    )
    incentives = relationship(
        "Incentive", back_populates="rate_card", order_by="Incentive.position", cascade="all, delete-orphan"
    )

    @classmethod
    def from_payload(cls, payload: dict, campground_id: str | None = None) -> "RateCard":
        return cls(
            rate_card_id=payload.get("id"),
            campground_id=payload.get("campgroundId") or campground_id,
            name=payload.get("name") or "",
            season_year=_as_int(payload.get("seasonYear")),
            base_rate=_as_float(payload.get("baseRate")),
            billing_frequency=payload.get("billingFrequency"),
            description=payload.get("description"),
            included_utilities=list(payload.get("includedUtilities") or []),
            season_start_date=parse_day(payload.get("seasonStartDate")),
            season_end_date=parse_day(payload.get("seasonEndDate")),
            is_active=bool(payload.get("isActive", True)),
            is_default=bool(payload.get("isDefault", False)),
            discounts=[Discount.from_payload(d, i) for i, d in enumerate(payload.get("discounts") or [])],
            incentives=[Incentive.from_payload(d, i) for i, d in enumerate(payload.get("incentives") or [])],
        )

    def __repr__(self) -> str:
        return f"<RateCard(id={self.rate_card_id}, name='{self.name}', base={self.base_rate}, year={self.season_year})>"


class Discount(Base):
    """Conditional price reduction attached to a rate card."""

    __tablename__ = "rate_card_discounts"

    discount_id = Column(String(64), primary_key=True, name="id")
    rate_card_id = Column(String(64), ForeignKey("rate_cards.id"), nullable=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    condition_type = Column(String(30), nullable=False)
    condition_value = Column(Text, nullable=True)  # JSON-encoded, e.g. {"methods": ["ach"]}
    discount_type = Column(String(20), nullable=False)
    discount_amount = Column(Float, nullable=False, default=0.0)
    stackable = Column(Boolean, nullable=False, default=True)
    priority = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    rate_card = relationship("RateCard", back_populates="discounts")

    @classmethod
    def from_payload(cls, payload: dict, position: int = 0) -> "Discount":
        return cls(
            discount_id=payload.get("id"),
            position=position,
            name=payload.get("name") or "",
            description=payload.get("description"),
            condition_type=payload.get("conditionType") or "",
            condition_value=payload.get("conditionValue"),
            discount_type=payload.get("discountType") or "",
            discount_amount=_as_float(payload.get("discountAmount")),
            stackable=bool(payload.get("stackable", True)),
            priority=_as_int(payload.get("priority")) or 0,
            is_active=bool(payload.get("isActive", True)),
        )

    def __repr__(self) -> str:
        return (
            f"<Discount(name='{self.name}', {self.condition_type}, "
            f"{self.discount_type}={self.discount_amount}, active={self.is_active})>"
        )


class Incentive(Base):
    """Conditional non-price bonus (credits, passes, ...) attached to a rate card."""

    __tablename__ = "rate_card_incentives"

    incentive_id = Column(String(64), primary_key=True, name="id")
    rate_card_id = Column(String(64), ForeignKey("rate_cards.id"), nullable=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    condition_type = Column(String(30), nullable=False)
    condition_value = Column(Text, nullable=True)
    incentive_type = Column(String(30), nullable=False)
    incentive_value = Column(Float, nullable=False, default=0.0)
    is_active = Column(Boolean, nullable=False, default=True)

    rate_card = relationship("RateCard", back_populates="incentives")

    @classmethod
    def from_payload(cls, payload: dict, position: int = 0) -> "Incentive":
        return cls(
            incentive_id=payload.get("id"),
            position=position,
            name=payload.get("name") or "",
            description=payload.get("description"),
            condition_type=payload.get("conditionType") or "",
            condition_value=payload.get("conditionValue"),
            incentive_type=payload.get("incentiveType") or "",
            incentive_value=_as_float(payload.get("incentiveValue")),
            is_active=bool(payload.get("isActive", True)),
        )

    def __repr__(self) -> str:
        return f"<Incentive(name='{self.name}', {self.incentive_type}={self.incentive_value}, active={self.is_active})>"
