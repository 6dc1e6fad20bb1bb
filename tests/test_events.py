import unittest
from datetime import datetime, timedelta

from base import ApiTestCase
from eventstudio.models import Event, Ticket


class TestCreateEvent(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.token, self.user = self.register("Organizer")

    def test_create_event(self):
        event = self.create_event(self.token, tags=" music , jazz,, ,live ", price="99.50", seats="40")
        self.assertEqual(event["tags"], ["music", "jazz", "live"])
        self.assertEqual(event["price"], 99.5)
        self.assertEqual(event["seats"], 40)
        self.assertEqual(event["booked"], 0)
        self.assertEqual(event["status"], "active")
        self.assertEqual(event["created_by"]["id"], self.user["id"])
        self.assertEqual(event["created_by"]["email"], self.user["email"])

    def test_iso_datetime_is_coerced_to_date(self):
        event = self.create_event(self.token, date="2030-03-15T18:30:00Z")
        self.assertEqual(event["date"], "2030-03-15")

    def test_zero_seats_and_free_events_are_allowed(self):
        event = self.create_event(self.token, seats=0, price=0)
        self.assertEqual(event["seats"], 0)
        self.assertEqual(event["price"], 0.0)

    def test_missing_required_field(self):
        payload = self.event_payload()
        del payload["venue"]
        resp = self.client.post("/api/events", json=payload, headers=self.auth(self.token))
        self.assertEqual(resp.status_code, 400)
        self.assertIn("venue", resp.get_json()["message"])

    def test_invalid_values(self):
        for override in ({"price": -5}, {"seats": "many"}, {"seats": 2.5}, {"date": "next tuesday"}):
            resp = self.client.post("/api/events", json=self.event_payload(**override),
                                    headers=self.auth(self.token))
            self.assertEqual(resp.status_code, 400, override)

    def test_image_must_be_text(self):
        resp = self.client.post("/api/events", json=self.event_payload(image={"url": "x.png"}),
                                headers=self.auth(self.token))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["error_code"], "VALIDATION_ERROR")
        event = self.create_event(self.token, image=None)
        self.assertEqual(event["image"], "")

    def test_long_free_text_is_not_truncated(self):
        for column in ("name", "time", "venue"):
            self.assertIsNone(Event.__table__.c[column].type.length, column)
        time = "Doors open 18:30, first set at 19:15 sharp"
        event = self.create_event(self.token, time=time)
        self.assertEqual(event["time"], time)

    def test_requires_authentication(self):
        resp = self.client.post("/api/events", json=self.event_payload())
        self.assertEqual(resp.status_code, 401)


class TestListEvents(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.token, _ = self.register("Organizer")
        self.jazz = self.create_event(self.token, name="Jazz Night", venue="Cairo Opera House")
        self.rock = self.create_event(self.token, name="Rock Fest", venue="Giza Plateau",
                                      description="Loud guitars")
        self.tech = self.create_event(self.token, name="Tech Summit", venue="Smart Village",
                                      description="Talks about 100% uptime")
        base = datetime(2026, 1, 1, 12, 0)
        for offset, event in enumerate((self.jazz, self.rock, self.tech)):
            self.update_row(Event, event["id"], created_at=base + timedelta(hours=offset))
        self.update_row(Event, self.rock["id"], status="cancelled")

    def list(self, **params):
        resp = self.client.get("/api/events", query_string=params, headers=self.auth(self.token))
        self.assertEqual(resp.status_code, 200)
        return resp.get_json()

    def test_newest_first_with_pagination(self):
        body = self.list(limit=2)
        self.assertEqual([e["name"] for e in body["data"]], ["Tech Summit", "Rock Fest"])
        self.assertEqual(body["pagination"]["total"], 3)
        self.assertEqual(body["pagination"]["total_pages"], 2)

        body = self.list(limit=2, page=2)
        self.assertEqual([e["name"] for e in body["data"]], ["Jazz Night"])

    def test_default_page_size(self):
        body = self.list()
        self.assertEqual(body["pagination"]["page"], 1)
        self.assertEqual(body["pagination"]["per_page"], 10)

    def test_search_across_name_venue_description(self):
        self.assertEqual([e["name"] for e in self.list(search="OPERA")["data"]], ["Jazz Night"])
        self.assertEqual([e["name"] for e in self.list(search="rock")["data"]], ["Rock Fest"])
        self.assertEqual([e["name"] for e in self.list(search="guitars")["data"]], ["Rock Fest"])
        self.assertEqual([e["name"] for e in self.list(search="100%")["data"]], ["Tech Summit"])
        self.assertEqual(self.list(search="opera")["pagination"]["total"], 1)

    def test_status_filter(self):
        body = self.list(status="cancelled")
        self.assertEqual([e["name"] for e in body["data"]], ["Rock Fest"])
        body = self.list(status="active", search="o")
        self.assertEqual({e["name"] for e in body["data"]}, {"Jazz Night", "Tech Summit"})

    def test_my_events(self):
        other_token, _ = self.register("Other")
        self.create_event(other_token, name="Other Party")

        resp = self.client.get("/api/events/user/events", headers=self.auth(other_token))
        body = resp.get_json()
        self.assertEqual([e["name"] for e in body["data"]], ["Other Party"])
        self.assertEqual(body["pagination"]["total"], 1)

        resp = self.client.get("/api/events/user/events", query_string={"limit": 1},
                               headers=self.auth(self.token))
        self.assertEqual(resp.get_json()["pagination"]["total_pages"], 3)


class TestGetEvent(ApiTestCase):
    def test_event_includes_booked_seats(self):
        token, _ = self.register("Organizer")
        event = self.create_event(token)
        u1, _ = self.register("Fan One")
        u2, _ = self.register("Fan Two")
        u3, _ = self.register("Fan Three")
        self.book_ok(u1, event["id"], "A1")
        cancelled = self.book_ok(u2, event["id"], "A2")
        self.book_ok(u3, event["id"], "A3")
        self.client.put(f"/api/tickets/cancel/{cancelled['id']}", headers=self.auth(u2))

        resp = self.client.get(f"/api/events/{event['id']}", headers=self.auth(token))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(sorted(resp.get_json()["data"]["booked_seats"]), ["A1", "A3"])

    def test_missing_event(self):
        token, _ = self.register("Organizer")
        resp = self.client.get("/api/events/00000000-0000-0000-0000-000000000000",
                               headers=self.auth(token))
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["error_code"], "EVENT_NOT_FOUND")

    def test_malformed_id(self):
        token, _ = self.register("Organizer")
        resp = self.client.get("/api/events/not-a-uuid", headers=self.auth(token))
        self.assertEqual(resp.status_code, 404)
        self.assertFalse(resp.get_json()["success"])


class TestUpdateDeleteEvent(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.owner_token, _ = self.register("Owner")
        self.other_token, _ = self.register("Stranger")
        self.admin_token, _ = self.register("Boss", role="admin")
        self.event = self.create_event(self.owner_token, tags="a, b")

    def put(self, token, payload):
        return self.client.put(f"/api/events/{self.event['id']}", json=payload, headers=self.auth(token))

    def test_partial_update(self):
        resp = self.put(self.owner_token, {"name": "Renamed", "price": 0, "seats": 50})
        self.assertEqual(resp.status_code, 200)
        updated = resp.get_json()["data"]
        self.assertEqual(updated["name"], "Renamed")
        self.assertEqual(updated["price"], 0.0)
        self.assertEqual(updated["seats"], 50)
        self.assertEqual(updated["venue"], self.event["venue"])
        self.assertEqual(updated["tags"], ["a", "b"])

    def test_image_update(self):
        resp = self.put(self.owner_token, {"image": ["a.png"]})
        self.assertEqual(resp.status_code, 400)
        resp = self.put(self.owner_token, {"image": " poster.png "})
        self.assertEqual(resp.get_json()["data"]["image"], "poster.png")

    def test_tags_and_status(self):
        resp = self.put(self.owner_token, {"tags": "x ,y", "status": "completed"})
        updated = resp.get_json()["data"]
        self.assertEqual(updated["tags"], ["x", "y"])
        self.assertEqual(updated["status"], "completed")
        self.assertEqual(self.put(self.owner_token, {"status": "postponed"}).status_code, 400)

    def test_explicit_null_on_required_field(self):
        self.assertEqual(self.put(self.owner_token, {"name": None}).status_code, 400)

    def test_only_owner_or_admin_may_update(self):
        self.assertEqual(self.put(self.other_token, {"name": "Mine now"}).status_code, 403)
        self.assertEqual(self.put(self.admin_token, {"name": "Moderated"}).status_code, 200)

    def test_update_missing_event(self):
        resp = self.client.put("/api/events/00000000-0000-0000-0000-000000000000",
                               json={"name": "x"}, headers=self.auth(self.owner_token))
        self.assertEqual(resp.status_code, 404)

    def test_delete_by_stranger_is_denied(self):
        resp = self.client.delete(f"/api/events/{self.event['id']}", headers=self.auth(self.other_token))
        self.assertEqual(resp.status_code, 403)
        self.assertIsNotNone(self.fetch(Event, self.event["id"]))

    def test_delete_keeps_tickets(self):
        fan_token, _ = self.register("Fan")
        ticket = self.book_ok(fan_token, self.event["id"], "C3")

        resp = self.client.delete(f"/api/events/{self.event['id']}", headers=self.auth(self.admin_token))
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(self.fetch(Event, self.event["id"]))

        orphan = self.fetch(Ticket, ticket["id"])
        self.assertEqual(orphan.status, "active")
        resp = self.client.get("/api/tickets/my-tickets", headers=self.auth(fan_token))
        self.assertIsNone(resp.get_json()["data"][0]["event"])

    def test_delete_by_owner(self):
        resp = self.client.delete(f"/api/events/{self.event['id']}", headers=self.auth(self.owner_token))
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get(f"/api/events/{self.event['id']}", headers=self.auth(self.owner_token))
        self.assertEqual(resp.status_code, 404)


if __name__ == '__main__':
    unittest.main()
