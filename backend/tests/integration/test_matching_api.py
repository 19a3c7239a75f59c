"""Integration tests for POST /api/v1/donors/match"""

from datetime import datetime, timezone

import pytest


MATCH_URL = "/api/v1/donors/match"


@pytest.fixture
def major_local_donor(make_donor):
    # Gift dates far in the past keep the recency score at 0 regardless of today's date
    return make_donor(
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.org",
        organization="Analytical Engines Ltd",
        city="Toronto",
        interests=["arts"],
        total_donations=80000,
        largest_gift=30000,
        first_gift_date=datetime(2000, 1, 1, tzinfo=timezone.utc),
        last_gift_date=datetime(2000, 6, 1, tzinfo=timezone.utc),
        subscription_events_in_person=True,
        subscription_newsletter=True,
    )


class TestMatchDonors:

    def test_scored_response(self, client, major_local_donor):
        response = client.post(MATCH_URL, json={"eventType": ["arts"], "location": "Toronto"})

        assert response.status_code == 200
        data = response.json()
        assert data["totalMatches"] == 1

        match = data["matches"][0]
        assert match["donor"]["id"] == major_local_donor.id
        assert match["donor"]["firstName"] == "Ada"
        assert match["score"] == 78.4
        assert match["breakdown"] == {
            "interest": 80,
            "location": 100,
            "donation": 78,
            "recency": 0,
            "engagement": 100,
            "capacity": 100,
        }
        assert match["matchReasons"] == [
            "Strong interest alignment",
            "Same location",
            "Highly engaged",
            "High capacity",
        ]

    def test_criteria_echoed_with_defaults(self, client):
        response = client.post(MATCH_URL, json={"eventType": [" arts ", ""]})

        assert response.status_code == 200
        criteria = response.json()["criteria"]
        assert criteria["eventType"] == ["arts"]
        assert criteria["targetAttendees"] == 100
        assert criteria["eventFocus"] == "fundraising"
        assert criteria["minTotalDonations"] == 0

    def test_excluded_and_deceased_donors_never_returned(self, client, make_donor):
        active = make_donor(first_name="Active")
        make_donor(first_name="Excluded", exclude=True)
        make_donor(first_name="Deceased", deceased=True)

        response = client.post(MATCH_URL, json={"eventType": ["arts"]})

        ids = [m["donor"]["id"] for m in response.json()["matches"]]
        assert ids == [active.id]

    def test_target_attendees_caps_results(self, client, make_donor):
        for amount in range(6):
            make_donor(total_donations=amount * 10000)

        response = client.post(MATCH_URL, json={"eventType": ["arts"], "targetAttendees": 3})

        matches = response.json()["matches"]
        assert len(matches) == 3
        scores = [m["score"] for m in matches]
        assert scores == sorted(scores, reverse=True)
        assert matches[0]["donor"]["totalDonations"] == 50000

    def test_min_total_donations(self, client, make_donor):
        make_donor(first_name="Small", total_donations=100)
        big = make_donor(first_name="Big", total_donations=5000)

        response = client.post(MATCH_URL, json={"eventType": ["arts"], "minTotalDonations": 1000})

        assert [m["donor"]["id"] for m in response.json()["matches"]] == [big.id]

    def test_weight_overrides(self, client, major_local_donor):
        weights = {
            "interestMatch": 1,
            "locationMatch": 0,
            "donationHistory": 0,
            "recency": 0,
            "engagement": 0,
            "capacity": 0,
        }
        response = client.post(MATCH_URL, json={"eventType": ["arts"], "weights": weights})

        assert response.json()["matches"][0]["score"] == 80

    def test_unknown_focus_scores_like_fundraising(self, client, major_local_donor):
        body = {"eventType": ["arts"], "location": "Toronto"}
        fundraising = client.post(MATCH_URL, json={**body, "eventFocus": "fundraising"}).json()
        unknown = client.post(MATCH_URL, json={**body, "eventFocus": "networking"}).json()

        assert unknown["matches"][0]["score"] == fundraising["matches"][0]["score"]

    def test_empty_pool(self, client):
        response = client.post(MATCH_URL, json={"eventType": ["arts"]})
        assert response.json()["matches"] == []
        assert response.json()["totalMatches"] == 0


class TestMatchValidation:

    @pytest.mark.parametrize("body", [
        {},
        {"eventType": []},
        {"eventType": ["  "]},
        {"eventType": ["arts"], "targetAttendees": 0},
        {"eventType": ["arts"], "minTotalDonations": -5},
        {"eventType": ["arts"], "weights": {"recency": -1}},
    ])
    def test_rejected(self, client, body):
        response = client.post(MATCH_URL, json=body)

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        assert response.json()["details"]
