import enum


class UserType(str, enum.Enum):
    DONOR = "Donor"
    RECEIVER = "Receiver"


class OrganizationType(str, enum.Enum):
    HOTEL = "Hotel"
    RESTAURANT = "Restaurant"
    MESS = "Mess"
    NGO = "NGO"
    INDIVIDUAL = "Individual"
    COMPANY = "Company"
    OTHER = "Other"


class CandidateStatus(str, enum.Enum):
    ACTIVE = "Active"
    BLOCKED = "Blocked"


class DonationStatus(str, enum.Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    COMPLETED = "Completed"


class QuantityUnit(str, enum.Enum):
    KILOGRAMS = "kg"
    PLATES = "plates"


def enum_column_type(enum_cls):
    from sqlalchemy import Enum

    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [member.value for member in members],
    )
