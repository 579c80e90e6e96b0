# services/auth_service.py
from typing import NamedTuple, Optional, Tuple, Union
from sqlalchemy.orm import Session

from foodbridge.core.security import verify_password
from foodbridge.models.roster import Donor, Receiver

ROLE_DONOR = "donor"
ROLE_RECEIVER = "receiver"


class Identity(NamedTuple):
    """Authenticated caller as carried by the access token"""
    email: str
    role: str


class AuthService:
    def __init__(self, db: Session):
        self.db = db

    def get_donor_by_email(self, email: str) -> Optional[Donor]:
        return self.db.query(Donor).filter(Donor.email == email.strip().lower()).first()

    def get_receiver_by_email(self, email: str) -> Optional[Receiver]:
        return self.db.query(Receiver).filter(Receiver.email == email.strip().lower()).first()

    def get_account(self, identity: Identity) -> Optional[Union[Donor, Receiver]]:
        if identity.role == ROLE_DONOR:
            return self.get_donor_by_email(identity.email)
        if identity.role == ROLE_RECEIVER:
            return self.get_receiver_by_email(identity.email)
        return None

    def authenticate(self, email: str, password: str) -> Optional[Tuple[Union[Donor, Receiver], str]]:
        """Check the donor roster first, then the receiver roster"""
        donor = self.get_donor_by_email(email)
        if donor and verify_password(password, donor.password_hash):
            return donor, ROLE_DONOR
        receiver = self.get_receiver_by_email(email)
        if receiver and verify_password(password, receiver.password_hash):
            return receiver, ROLE_RECEIVER
        return None
