"""
Tests for event registration
"""
from datetime import timedelta

from conftest import create_event, make_partner


class TestParticipantRoutes:
    """Test registering and unregistering for events"""

    def test_register_for_event(self, client, host_headers, guest_headers):
        event = create_event(client, host_headers)
        response = client.post(f"/api/events/{event['id']}/participants", headers=guest_headers)
        assert response.status_code == 201
        assert response.json()["currentParticipants"] == 1

        participants = client.get(
            f"/api/events/{event['id']}/participants", headers=host_headers
        ).json()
        assert [p["firstName"] for p in participants] == ["Ravi"]

    def test_host_cannot_register(self, client, host_headers):
        event = create_event(client, host_headers)
        response = client.post(f"/api/events/{event['id']}/participants", headers=host_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Hosts cannot register for their own events"

    def test_register_twice(self, client, host_headers, guest_headers):
        event = create_event(client, host_headers)
        url = f"/api/events/{event['id']}/participants"
        client.post(url, headers=guest_headers)
        response = client.post(url, headers=guest_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Already registered for this event"

    def test_capacity_is_respected(self, client, host_headers, guest_headers):
        event = create_event(client, host_headers, maxParticipants=1)
        url = f"/api/events/{event['id']}/participants"
        assert client.post(url, headers=guest_headers).status_code == 201

        late = make_partner(client, email="late@example.com", username="late", first_name="Late")
        response = client.post(url, headers=late)
        assert response.status_code == 400
        assert response.json()["message"] == "Event is full"
        assert response.json()["capacity"] == 1

    def test_capacity_cannot_drop_below_registrations(self, client, host_headers, guest_headers):
        event = create_event(client, host_headers)
        client.post(f"/api/events/{event['id']}/participants", headers=guest_headers)
        response = client.put(
            f"/api/events/{event['id']}", headers=host_headers, json={"maxParticipants": 0}
        )
        assert response.status_code == 400

        other = make_partner(client, email="third@example.com", username="third", first_name="Tara")
        client.post(f"/api/events/{event['id']}/participants", headers=other)
        response = client.put(
            f"/api/events/{event['id']}", headers=host_headers, json={"maxParticipants": 1}
        )
        assert response.status_code == 400
        assert response.json()["field"] == "maxParticipants"

    def test_draft_is_invisible_to_others(self, client, host_headers, guest_headers):
        event = create_event(client, host_headers, draftMode=True)
        response = client.post(f"/api/events/{event['id']}/participants", headers=guest_headers)
        assert response.status_code == 404

    def test_cannot_register_for_past_event(self, client, host_headers, guest_headers):
        event = create_event(client, host_headers, start_in=timedelta(days=-2))
        response = client.post(f"/api/events/{event['id']}/participants", headers=guest_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot register for a past event"

    def test_cannot_register_for_cancelled_event(self, client, host_headers, guest_headers):
        event = create_event(client, host_headers, start_in=timedelta(days=5))
        client.post(f"/api/events/{event['id']}/cancel", headers=host_headers, json={"reason": "Off"})
        response = client.post(f"/api/events/{event['id']}/participants", headers=guest_headers)
        assert response.status_code == 400

    def test_unregister(self, client, host_headers, guest_headers):
        event = create_event(client, host_headers)
        url = f"/api/events/{event['id']}/participants"
        client.post(url, headers=guest_headers)

        response = client.delete(url, headers=guest_headers)
        assert response.status_code == 200
        assert response.json()["currentParticipants"] == 0

        response = client.delete(url, headers=guest_headers)
        assert response.status_code == 404
        assert response.json()["message"] == "Registration not found"

    def test_only_host_lists_participants(self, client, host_headers, guest_headers):
        event = create_event(client, host_headers)
        response = client.get(f"/api/events/{event['id']}/participants", headers=guest_headers)
        assert response.status_code == 403
