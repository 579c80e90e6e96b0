import csv
import io
import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from foodbridge.models.donation import Donation
from foodbridge.models.enums import DonationStatus, QuantityUnit
from foodbridge.models.roster import Donor, Receiver

logger = logging.getLogger(__name__)

# Accepted or later
CLAIMED_STATUSES = (DonationStatus.ACCEPTED, DonationStatus.COMPLETED)

REPORT_COLUMNS = ["food_name", "donor_name", "receiver_name", "total_kg", "total_plates"]


def _unit_total(unit: QuantityUnit):
    return func.coalesce(
        func.sum(case((Donation.quantity_unit == unit, Donation.quantity_amount), else_=0)),
        0,
    )


def _status_count(status: DonationStatus):
    return func.coalesce(func.sum(case((Donation.status == status, 1), else_=0)), 0)


def _day(value) -> str:
    # SQLite returns the DATE() result as text, PostgreSQL as a date
    return value.isoformat() if isinstance(value, date) else str(value)


def report_to_csv(rows: List[dict]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=REPORT_COLUMNS)
    writer.writeheader()
    for row in rows:
        writer.writerow({key: row.get(key) for key in REPORT_COLUMNS})
    return buffer.getvalue()


class AnalyticsService:
    """Read-only projections over donation history. Quantities are summed per unit."""

    def __init__(self, db: Session):
        self.db = db

    def category_breakdown(self) -> List[dict]:
        rows = (
            self.db.query(Donation.food_category, func.count(Donation.id))
            .filter(Donation.status.in_(CLAIMED_STATUSES))
            .group_by(Donation.food_category)
            .order_by(func.count(Donation.id).desc(), Donation.food_category)
            .all()
        )
        return [{"food_category": category, "donations_count": count} for category, count in rows]

    def quantity_over_time(self) -> List[dict]:
        day = func.date(Donation.created_at)
        rows = (
            self.db.query(
                day.label("day"),
                _unit_total(QuantityUnit.KILOGRAMS).label("total_kg"),
                _unit_total(QuantityUnit.PLATES).label("total_plates"),
            )
            .filter(Donation.status.in_(CLAIMED_STATUSES))
            .group_by(day)
            .order_by(day)
            .all()
        )
        return [
            {"date": _day(row.day), "total_kg": float(row.total_kg), "total_plates": float(row.total_plates)}
            for row in rows
        ]

    def status_comparison(self) -> List[dict]:
        day = func.date(Donation.created_at)
        rows = (
            self.db.query(
                day.label("day"),
                _status_count(DonationStatus.PENDING).label("pending"),
                _status_count(DonationStatus.ACCEPTED).label("accepted"),
                _status_count(DonationStatus.COMPLETED).label("completed"),
            )
            .group_by(day)
            .order_by(day)
            .all()
        )
        return [
            {"date": _day(row.day), "pending": int(row.pending), "accepted": int(row.accepted),
             "completed": int(row.completed)}
            for row in rows
        ]

    def top_donors(self, limit: int = 10) -> List[dict]:
        total_kg = _unit_total(QuantityUnit.KILOGRAMS)
        total_plates = _unit_total(QuantityUnit.PLATES)
        rows = (
            self.db.query(
                Donor.organization_name,
                total_kg.label("total_kg"),
                total_plates.label("total_plates"),
            )
            .join(Donation, Donation.donor_id == Donor.id)
            .filter(Donation.status.in_(CLAIMED_STATUSES))
            .group_by(Donor.id, Donor.organization_name)
            .order_by((total_kg + total_plates).desc(), Donor.organization_name)
            .limit(limit)
            .all()
        )
        return [
            {
                "organization_name": row.organization_name,
                "total_kg": float(row.total_kg),
                "total_plates": float(row.total_plates),
                "total_donated": float(row.total_kg) + float(row.total_plates),
            }
            for row in rows
        ]

    def statistics_summary(self) -> dict:
        row = self.db.query(
            func.count(Donation.id).label("total"),
            _status_count(DonationStatus.PENDING).label("pending"),
            _status_count(DonationStatus.ACCEPTED).label("accepted"),
            _status_count(DonationStatus.COMPLETED).label("completed"),
        ).one()
        return {
            "total": int(row.total),
            "pending": int(row.pending),
            "accepted": int(row.accepted),
            "completed": int(row.completed),
        }

    def recent_donations(self, limit: int = 5) -> List[dict]:
        rows = (
            self.db.query(Donation.food_name, Donor.organization_name, Donation.created_at)
            .join(Donor, Donation.donor_id == Donor.id)
            .order_by(Donation.created_at.desc(), Donation.id.asc())
            .limit(limit)
            .all()
        )
        return [
            {"food_name": food_name, "donor_name": donor_name, "created_at": created_at}
            for food_name, donor_name, created_at in rows
        ]

    def custom_report(self, start_date: date, end_date: date, category: Optional[str] = None) -> List[dict]:
        """One row per (food name, donor, receiver) for claimed donations created
        between start_date and end_date inclusive. An empty list means no data.
        """
        start = datetime.combine(start_date, time.min)
        end = datetime.combine(end_date + timedelta(days=1), time.min)
        query = (
            self.db.query(
                Donation.food_name,
                Donor.organization_name.label("donor_name"),
                Receiver.organization_name.label("receiver_name"),
                _unit_total(QuantityUnit.KILOGRAMS).label("total_kg"),
                _unit_total(QuantityUnit.PLATES).label("total_plates"),
            )
            .join(Donor, Donation.donor_id == Donor.id)
            .outerjoin(Receiver, Donation.accepted_by == Receiver.id)
            .filter(
                Donation.status.in_(CLAIMED_STATUSES),
                Donation.created_at >= start,
                Donation.created_at < end,
            )
        )
        if category:
            query = query.filter(Donation.food_category == category)
        rows = (
            query.group_by(Donation.food_name, Donor.organization_name, Receiver.organization_name)
            .order_by(Donation.food_name, Donor.organization_name, Receiver.organization_name)
            .all()
        )
        logger.info(f"Custom report {start_date}..{end_date} category={category!r}: {len(rows)} rows")
        return [
            {
                "food_name": row.food_name,
                "donor_name": row.donor_name,
                "receiver_name": row.receiver_name,
                "total_kg": float(row.total_kg),
                "total_plates": float(row.total_plates),
            }
            for row in rows
        ]
