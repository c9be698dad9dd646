"""
Integration tests for the HTTP surface.
"""
from __future__ import annotations


class TestHealth:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"


class TestCatalogEndpoints:
    def test_list_badges(self, client):
        r = client.get("/badges")
        assert r.status_code == 200
        body = r.json()
        assert len(body) == 14
        categories = [b["category"] for b in body]
        assert categories == sorted(categories)

    def test_list_badges_by_category(self, client):
        r = client.get("/badges?category=combo")
        assert r.status_code == 200
        assert [b["key"] for b in r.json()] == ["world_builder"]

    def test_get_badge(self, client):
        r = client.get("/badges/prepared_pro")
        assert r.status_code == 200
        body = r.json()
        assert body["requirement_type"] == "time_relative"
        assert body["requirement_value"] == 3
        assert body["scope"] == "per_trip"
        assert body["family"] == "checklist"

    def test_get_unknown_badge(self, client):
        r = client.get("/badges/moon_walker")
        assert r.status_code == 404
        body = r.json()
        assert body["code"] == "BADGE_NOT_FOUND"
        assert body["details"]["badge_key"] == "moon_walker"


class TestTriggerEndpoints:
    def test_trigger_dare_then_read_badges(self, client, seed, user_id):
        trip = seed.trip(user_id)
        seed.complete(*seed.dares(user_id, trip, 3))

        r = client.post("/triggers/dare", json={"user_id": user_id, "trip_id": trip})
        assert r.status_code == 202
        result = r.json()["results"][0]
        assert result["family"] == "dare"
        assert set(result["awarded"]) == {"daredevil", "on_a_roll", "bucket_legend"}

        r = client.get(f"/users/{user_id}/badges?trip_id={trip}")
        assert r.status_code == 200
        body = r.json()
        assert body["total"] == 3
        item = next(i for i in body["items"] if i["badge"]["key"] == "on_a_roll")
        assert item["trip_id"] == trip
        snap = item["progress_snapshot"]
        assert snap["kind"] == "dare"
        assert snap["completed"] == 3
        assert snap["target_count"] == 3

    def test_trigger_all(self, client, seed, user_id):
        trip = seed.trip(user_id)
        r = client.post("/triggers/all", json={"user_id": user_id, "trip_id": trip})
        assert r.status_code == 202
        families = [res["family"] for res in r.json()["results"]]
        assert families == ["dare", "checklist", "invitation", "combo"]

    def test_progress_states(self, client, seed, user_id):
        trip = seed.trip(user_id)
        seed.invitations(user_id, trip, sent=2, accepted=1)
        client.post("/triggers/invitation", json={"user_id": user_id, "trip_id": trip})

        r = client.get(f"/users/{user_id}/progress")
        assert r.status_code == 200
        states = {i["badge"]["key"]: i["state"] for i in r.json()["items"]}
        assert states["social_explorer"] == "earned"
        assert states["travel_crew"] == "in_progress"
        assert states["squad_goals"] == "in_progress"
        assert states["referral_master"] == "in_progress"

        r = client.get(f"/users/{user_id}/progress?trip_id={trip}")
        keys = {i["badge"]["key"] for i in r.json()["items"]}
        assert "referral_master" not in keys
        evidence = r.json()["items"][0]["evidence"]
        assert evidence["kind"] == "invitation"
        assert evidence["sent"] == 2

    def test_not_started_state(self, client, seed, user_id):
        trip = seed.trip(user_id)
        client.post("/triggers/dare", json={"user_id": user_id, "trip_id": trip})
        r = client.get(f"/users/{user_id}/progress?trip_id={trip}")
        assert {i["state"] for i in r.json()["items"]} == {"not_started"}

    def test_unknown_family(self, client):
        r = client.post("/triggers/tips", json={"user_id": "u", "trip_id": "t"})
        assert r.status_code == 404
        body = r.json()
        assert body["code"] == "UNKNOWN_FAMILY"
        assert "all" in body["details"]["known"]

    def test_missing_trip_id(self, client):
        r = client.post("/triggers/dare", json={"user_id": "u"})
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert any(e["field"] == "trip_id" for e in body["details"]["errors"])

    def test_user_without_badges(self, client):
        r = client.get("/users/nobody/badges")
        assert r.status_code == 200
        assert r.json() == {"total": 0, "items": []}
