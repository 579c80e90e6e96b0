import threading
from datetime import datetime, timedelta

import pytest

from conftest import auth_headers
from foodbridge.models.donation import Donation
from foodbridge.models.enums import DonationStatus, QuantityUnit
from foodbridge.schemas.donation import DonationCreate
from foodbridge.services.auth_service import Identity
from foodbridge.services.donation_service import (
    AcceptOutcome, CompleteOutcome, CreateOutcome, DonationService,
)


def offer(**overrides):
    data = {"food_category": "Cooked", "food_name": "Veg Biryani", "quantity": "10kg"}
    data.update(overrides)
    return DonationCreate(**data)


@pytest.fixture
def service(db):
    return DonationService(db, require_acceptance_before_completion=True)


@pytest.fixture
def donor(make_donor):
    return make_donor(email="donor@example.com", name="Green Kitchen")


@pytest.fixture
def receiver(make_receiver):
    return make_receiver(email="receiver@example.com", name="Food For All")


def test_create_parses_quantity(db, service, donor):
    result = service.create("donor@example.com", offer(quantity="5 plates"))
    assert result.outcome == CreateOutcome.CREATED

    donation = db.get(Donation, result.donation_id)
    assert donation.status == DonationStatus.PENDING
    assert donation.quantity == "5 plates"
    assert donation.quantity_amount == 5
    assert donation.quantity_unit == QuantityUnit.PLATES
    assert donation.accepted_by is None


def test_create_requires_name_and_quantity(service, donor):
    assert service.create("donor@example.com", offer(food_name="")).outcome == CreateOutcome.VALIDATION_ERROR
    assert service.create("donor@example.com", offer(quantity=" ")).outcome == CreateOutcome.VALIDATION_ERROR
    result = service.create("donor@example.com", offer(quantity="lots"))
    assert result.outcome == CreateOutcome.VALIDATION_ERROR
    assert "unit" in result.error


def test_create_for_unknown_donor(service):
    assert service.create("nobody@example.com", offer()).outcome == CreateOutcome.NO_SUCH_DONOR


def test_pending_listing_is_newest_first(db, service, donor):
    first = service.create("donor@example.com", offer(food_name="Rice")).donation_id
    second = service.create("donor@example.com", offer(food_name="Bread")).donation_id
    tied = service.create("donor@example.com", offer(food_name="Soup")).donation_id
    same_time = datetime(2024, 3, 1, 12, 0)
    db.query(Donation).filter(Donation.id == first).update({Donation.created_at: same_time - timedelta(days=1)})
    db.query(Donation).filter(Donation.id.in_([second, tied])).update({Donation.created_at: same_time})
    db.commit()

    listing = service.list_pending()
    assert [row["donation_id"] for row in listing] == [second, tied, first]
    assert listing[0]["organization_name"] == "Green Kitchen"
    assert listing[0]["email"] == "donor@example.com"


def test_accept_sets_claimant(db, service, donor, receiver):
    donation_id = service.create("donor@example.com", offer()).donation_id
    assert service.accept(donation_id, "receiver@example.com") == AcceptOutcome.ACCEPTED

    donation = db.get(Donation, donation_id)
    assert donation.status == DonationStatus.ACCEPTED
    assert donation.accepted_by == receiver.id
    assert donation.accepted_at is not None
    assert service.list_pending() == []


def test_accept_failures(service, donor, receiver, make_receiver):
    donation_id = service.create("donor@example.com", offer()).donation_id
    assert service.accept(donation_id, "stranger@example.com") == AcceptOutcome.NO_SUCH_RECEIVER
    assert service.accept(9999, "receiver@example.com") == AcceptOutcome.NO_SUCH_DONATION

    make_receiver(email="other@example.com", name="Shelter")
    assert service.accept(donation_id, "receiver@example.com") == AcceptOutcome.ACCEPTED
    assert service.accept(donation_id, "other@example.com") == AcceptOutcome.ALREADY_ACCEPTED


def test_concurrent_accepts_have_one_winner(session_factory, service, donor, receiver, make_receiver):
    make_receiver(email="r2@example.com", name="Shelter")
    donation_id = service.create("donor@example.com", offer()).donation_id

    barrier = threading.Barrier(2)
    results = {}

    def claim(email):
        session = session_factory()
        try:
            barrier.wait()
            results[email] = DonationService(session).accept(donation_id, email)
        finally:
            session.close()

    threads = [threading.Thread(target=claim, args=(email,)) for email in ("receiver@example.com", "r2@example.com")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(results.values()) == sorted([AcceptOutcome.ACCEPTED, AcceptOutcome.ALREADY_ACCEPTED])
    winner = next(email for email, outcome in results.items() if outcome == AcceptOutcome.ACCEPTED)

    session = session_factory()
    try:
        donation = session.get(Donation, donation_id)
        assert donation.receiver.email == winner
    finally:
        session.close()


def test_completion_requires_acceptance_by_default(db, service, donor, receiver):
    donation_id = service.create("donor@example.com", offer()).donation_id
    assert service.mark_completed(donation_id) == CompleteOutcome.NOT_ACCEPTED

    service.accept(donation_id, "receiver@example.com")
    assert service.mark_completed(donation_id) == CompleteOutcome.COMPLETED
    assert service.mark_completed(donation_id) == CompleteOutcome.ALREADY_COMPLETED

    donation = db.get(Donation, donation_id)
    assert donation.status == DonationStatus.COMPLETED
    assert donation.accepted_by == receiver.id
    assert donation.completed_at is not None


def test_permissive_completion_of_pending_donation(db, donor):
    service = DonationService(db, require_acceptance_before_completion=False)
    donation_id = service.create("donor@example.com", offer()).donation_id
    assert service.mark_completed(donation_id) == CompleteOutcome.COMPLETED
    assert service.mark_completed(donation_id) == CompleteOutcome.COMPLETED
    assert service.mark_completed(12345) == CompleteOutcome.NO_SUCH_DONATION


def test_only_parties_can_complete(service, donor, receiver, make_receiver):
    make_receiver(email="other@example.com", name="Shelter")
    donation_id = service.create("donor@example.com", offer()).donation_id
    service.accept(donation_id, "receiver@example.com")

    outsider = Identity(email="other@example.com", role="receiver")
    assert service.mark_completed(donation_id, actor=outsider) == CompleteOutcome.FORBIDDEN
    owner = Identity(email="donor@example.com", role="donor")
    assert service.mark_completed(donation_id, actor=owner) == CompleteOutcome.COMPLETED


def test_histories_are_scoped_by_role(service, donor, receiver, make_donor, make_receiver):
    make_donor(email="d2@example.com", name="Bakery")
    make_receiver(email="r2@example.com", name="Shelter")
    mine = service.create("donor@example.com", offer(food_name="Rice")).donation_id
    other = service.create("d2@example.com", offer(food_name="Bread")).donation_id
    done = service.create("donor@example.com", offer(food_name="Dal")).donation_id
    service.accept(mine, "receiver@example.com")
    service.accept(other, "r2@example.com")
    service.accept(done, "receiver@example.com")
    service.mark_completed(done)

    donor_history = service.history_for_donor("donor@example.com")
    assert [row["donation_id"] for row in donor_history] == [done, mine]
    assert donor_history[0]["receiver_name"] == "Food For All"

    assert [row["donation_id"] for row in service.history_for_receiver("receiver@example.com")] == [mine]
    with_completed = service.history_for_receiver("receiver@example.com", include_completed=True)
    assert [row["donation_id"] for row in with_completed] == [done, mine]

    assert [row["donation_id"] for row in service.list_accepted()] == [other, mine]


def test_donation_flow_over_http(client, donor, receiver):
    donor_auth = auth_headers("donor@example.com", "donor")
    receiver_auth = auth_headers("receiver@example.com", "receiver")

    response = client.post("/api/v1/donations", json={"food_name": "Rice", "quantity": "12kg"}, headers=donor_auth)
    assert response.status_code == 201
    donation_id = response.json()["donation_id"]

    response = client.post("/api/v1/donations", json={"food_name": "Rice", "quantity": "12"}, headers=donor_auth)
    assert response.status_code == 400

    response = client.post("/api/v1/donations", json={"food_name": "Rice", "quantity": "1kg"}, headers=receiver_auth)
    assert response.status_code == 403

    pending = client.get("/api/v1/donations", headers=receiver_auth).json()
    assert [row["donation_id"] for row in pending] == [donation_id]

    assert client.post(f"/api/v1/donations/{donation_id}/accept", headers=donor_auth).status_code == 403
    assert client.post(f"/api/v1/donations/{donation_id}/accept", headers=receiver_auth).status_code == 200
    response = client.post(f"/api/v1/donations/{donation_id}/accept", headers=receiver_auth)
    assert response.status_code == 409
    assert response.json() == {"detail": "Donation is already Accepted."}
    assert client.post("/api/v1/donations/999/accept", headers=receiver_auth).status_code == 404

    history = client.get("/api/v1/donations/history", headers=receiver_auth).json()
    assert history[0]["donor_name"] == "Green Kitchen"

    assert client.post(f"/api/v1/donations/{donation_id}/complete", headers=receiver_auth).status_code == 200
    assert client.post(f"/api/v1/donations/{donation_id}/complete", headers=receiver_auth).status_code == 409

    history = client.get("/api/v1/donations/donor/history", headers=donor_auth).json()
    assert history[0]["status"] == "Completed"
    assert client.get("/api/v1/donations/donor/history", headers=receiver_auth).status_code == 403


def test_thousands_separated_quantity_is_rejected(client, db, donor):
    response = client.post(
        "/api/v1/donations",
        json={"food_name": "Rice", "quantity": "1,000kg"},
        headers=auth_headers("donor@example.com", "donor"),
    )
    assert response.status_code == 400
    assert db.query(Donation).count() == 0
