from foodbridge.models.contact import ContactMessage, Feedback


def test_contact_message_is_stored_and_forwarded(client, db, outbox):
    response = client.post(
        "/api/v1/contact",
        json={"name": "Asha", "email": "asha@example.com", "message": "How do I join?"},
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Message sent successfully!"

    stored = db.query(ContactMessage).one()
    assert stored.email == "asha@example.com"
    assert outbox.sent[-1]["to"] == "admin@test"
    assert "How do I join?" in outbox.sent[-1]["body"]


def test_contact_still_stored_when_mail_fails(client, db, outbox):
    outbox.fail = True
    response = client.post(
        "/api/v1/contact",
        json={"name": "Asha", "email": "asha@example.com", "message": "Hello"},
    )
    assert response.status_code == 200
    assert db.query(ContactMessage).count() == 1


def test_contact_requires_valid_email(client):
    response = client.post("/api/v1/contact", json={"name": "Asha", "email": "nope", "message": "Hi"})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "email"


def test_feedback_listing(client, db):
    assert client.post("/api/v1/feedback", json={"name": "Ravi", "feedback": "Smooth pickup"}).status_code == 201
    assert client.post("/api/v1/feedback", json={"name": "Meera", "feedback": "Great app"}).status_code == 201
    assert client.post("/api/v1/feedback", json={"name": "Meera", "feedback": ""}).status_code == 400

    feedbacks = client.get("/api/v1/feedbacks").json()
    assert [item["name"] for item in feedbacks] == ["Meera", "Ravi"]
    assert db.query(Feedback).count() == 2
