"""
Tests for offer routes
"""
from datetime import datetime, timedelta

from conftest import create_event


def offer_payload(expires_in=timedelta(days=10), **overrides):
    now = datetime.utcnow()
    payload = {
        "text": "Festive discount",
        "percentage": 15,
        "startDate": (now - timedelta(days=1)).isoformat(),
        "expiryDate": (now + expires_in).isoformat() if expires_in is not None else None,
    }
    payload.update(overrides)
    return payload


class TestOfferRoutes:
    """Test offer CRUD, status derivation and event linking"""

    def create_offer(self, client, headers, **kwargs):
        response = client.post("/api/offers", headers=headers, json=offer_payload(**kwargs))
        assert response.status_code == 201, response.text
        return response.json()

    def test_create_offer(self, client, host_headers):
        offer = self.create_offer(client, host_headers)
        assert offer["text"] == "Festive discount"
        assert offer["percentage"] == 15
        assert offer["status"] == "Active"

    def test_offer_without_expiry_is_active(self, client, host_headers):
        offer = self.create_offer(client, host_headers, expires_in=None)
        assert offer["expiryDate"] is None
        assert offer["status"] == "Active"

    def test_percentage_bounds(self, client, host_headers):
        for percentage in (0, 101):
            response = client.post(
                "/api/offers", headers=host_headers, json=offer_payload(percentage=percentage)
            )
            assert response.status_code == 400
            assert response.json()["field"] == "percentage"

    def test_expiry_before_start_rejected(self, client, host_headers):
        response = client.post(
            "/api/offers", headers=host_headers, json=offer_payload(expires_in=timedelta(days=-5))
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Expiry date must be after start date"

    def test_status_filter(self, client, host_headers):
        self.create_offer(client, host_headers, text="Current")
        self.create_offer(
            client, host_headers, text="Old",
            startDate=(datetime.utcnow() - timedelta(days=30)).isoformat(),
            expires_in=timedelta(days=-1),
        )

        active = client.get("/api/offers", headers=host_headers).json()
        expired = client.get("/api/offers", headers=host_headers, params={"status": "expired"}).json()
        everything = client.get("/api/offers", headers=host_headers, params={"status": "all"}).json()

        assert [o["text"] for o in active] == ["Current"]
        assert [o["text"] for o in expired] == ["Old"]
        assert expired[0]["status"] == "Expired"
        assert len(everything) == 2

    def test_unknown_status_rejected(self, client, host_headers):
        response = client.get("/api/offers", headers=host_headers, params={"status": "soon"})
        assert response.status_code == 400

    def test_link_to_all_events(self, client, host_headers):
        create_event(client, host_headers, name="Upcoming")
        create_event(client, host_headers, name="Draft", draftMode=True)
        create_event(client, host_headers, name="Past", start_in=timedelta(days=-5))

        offer = self.create_offer(client, host_headers, linkToAllEvents=True)

        linked = client.get(f"/api/offers/{offer['id']}/events", headers=host_headers).json()
        assert sorted(e["name"] for e in linked) == ["Draft", "Past", "Upcoming"]
        assert all(e["offerId"] == offer["id"] for e in linked)

    def test_link_on_update(self, client, host_headers):
        create_event(client, host_headers)
        offer = self.create_offer(client, host_headers)
        assert client.get(f"/api/offers/{offer['id']}/events", headers=host_headers).json() == []

        response = client.put(
            f"/api/offers/{offer['id']}", headers=host_headers,
            json=offer_payload(text="Updated", linkToAllEvents=True),
        )
        assert response.status_code == 200
        assert response.json()["text"] == "Updated"
        assert len(client.get(f"/api/offers/{offer['id']}/events", headers=host_headers).json()) == 1

    def test_link_does_not_touch_other_partners(self, client, host_headers, guest_headers):
        theirs = create_event(client, guest_headers)
        self.create_offer(client, host_headers, linkToAllEvents=True)

        event = client.get(f"/api/events/{theirs['id']}", headers=guest_headers).json()
        assert event["offerId"] is None

    def test_delete_offer_unlinks_events(self, client, host_headers):
        event = create_event(client, host_headers)
        offer = self.create_offer(client, host_headers, linkToAllEvents=True)

        response = client.delete(f"/api/offers/{offer['id']}", headers=host_headers)
        assert response.status_code == 204

        refreshed = client.get(f"/api/events/{event['id']}", headers=host_headers).json()
        assert refreshed["offerId"] is None
        assert client.get(f"/api/offers/{offer['id']}", headers=host_headers).status_code == 404

    def test_event_with_own_offer(self, client, host_headers):
        offer = self.create_offer(client, host_headers)
        event = create_event(client, host_headers, offerId=offer["id"])
        assert event["offerId"] == offer["id"]

    def test_event_with_missing_offer(self, client, host_headers):
        response = client.post("/api/events", headers=host_headers, json={
            "name": "Broken",
            "startDate": (datetime.utcnow() + timedelta(days=2)).isoformat(),
            "endDate": (datetime.utcnow() + timedelta(days=2, hours=2)).isoformat(),
            "offerId": "missing",
        })
        assert response.status_code == 404

    def test_event_with_other_partners_offer(self, client, host_headers, guest_headers):
        offer = self.create_offer(client, guest_headers)
        event = create_event(client, host_headers)
        response = client.put(
            f"/api/events/{event['id']}", headers=host_headers, json={"offerId": offer["id"]}
        )
        assert response.status_code == 403

    def test_other_partner_cannot_manage_offer(self, client, host_headers, guest_headers):
        offer = self.create_offer(client, host_headers)
        assert client.get(f"/api/offers/{offer['id']}", headers=guest_headers).status_code == 403
        assert client.delete(f"/api/offers/{offer['id']}", headers=guest_headers).status_code == 403
