import pytest

from conftest import auth_headers
from foodbridge.models.rating import Rating
from foodbridge.schemas.donation import DonationCreate
from foodbridge.services.donation_service import DonationService
from foodbridge.services.rating_service import RateOutcome, RatingService


@pytest.fixture
def accepted_donation(db, make_donor, make_receiver):
    donor = make_donor()
    make_receiver()
    service = DonationService(db)
    donation_id = service.create(
        donor.email, DonationCreate(food_name="Chapati", quantity="20 plates")
    ).donation_id
    service.accept(donation_id, "receiver@example.com")
    return donation_id, donor.id


def test_accepting_receiver_can_rate(db, accepted_donation):
    donation_id, donor_id = accepted_donation
    service = RatingService(db)

    assert service.rate(donation_id, "receiver@example.com", 4, "Fresh and on time") == RateOutcome.RATED
    assert service.rate(donation_id, "receiver@example.com", 2) == RateOutcome.RATED

    ratings = db.query(Rating).all()
    assert len(ratings) == 1
    assert ratings[0].rating == 2
    assert ratings[0].review is None
    assert ratings[0].donor_id == donor_id


def test_other_receivers_cannot_rate(db, accepted_donation, make_receiver):
    donation_id, _ = accepted_donation
    make_receiver(email="other@example.com", name="Shelter")
    service = RatingService(db)

    assert service.rate(donation_id, "other@example.com", 5) == RateOutcome.FORBIDDEN
    assert service.rate(donation_id, "ghost@example.com", 5) == RateOutcome.NO_SUCH_RECEIVER
    assert service.rate(4242, "receiver@example.com", 5) == RateOutcome.NO_SUCH_DONATION
    assert db.query(Rating).count() == 0


def test_donor_profile_averages_ratings(db, make_donor, make_receiver):
    donor = make_donor()
    make_receiver()
    make_receiver(email="other@example.com", name="Shelter")
    donations = DonationService(db)
    first = donations.create(donor.email, DonationCreate(food_name="Rice", quantity="5kg")).donation_id
    second = donations.create(donor.email, DonationCreate(food_name="Dal", quantity="3kg")).donation_id
    donations.accept(first, "receiver@example.com")
    donations.accept(second, "other@example.com")

    ratings = RatingService(db)
    ratings.rate(first, "receiver@example.com", 5, "Great")
    ratings.rate(second, "other@example.com", 4)

    profile = ratings.donor_profile(donor.id)
    assert profile["organization_name"] == "Green Kitchen"
    assert profile["average_rating"] == 4.5
    assert {entry["receiver_name"] for entry in profile["ratings"]} == {"Food For All", "Shelter"}


def test_profile_without_ratings(db, make_donor):
    donor = make_donor()
    profile = RatingService(db).donor_profile(donor.id)
    assert profile["average_rating"] is None
    assert profile["ratings"] == []
    assert RatingService(db).donor_profile(donor.id + 100) is None


def test_rating_over_http(client, accepted_donation):
    donation_id, donor_id = accepted_donation
    url = f"/api/v1/donations/{donation_id}/rating"

    response = client.post(url, json={"rating": 5}, headers=auth_headers("receiver@example.com", "receiver"))
    assert response.status_code == 200
    assert client.post(url, json={"rating": 5}, headers=auth_headers("donor@example.com", "donor")).status_code == 403
    assert client.post(url, json={"rating": 5}).status_code == 401

    response = client.post(url, json={"rating": 6}, headers=auth_headers("receiver@example.com", "receiver"))
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "rating"

    profile = client.get(f"/api/v1/donors/{donor_id}/profile").json()
    assert profile["average_rating"] == 5.0
    assert client.get("/api/v1/donors/999/profile").status_code == 404
