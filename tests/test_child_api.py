"""
HTTP tests for the per-business child collections:
/businesses/{business_id}/{locations|hours|services|reviews}
"""

from dataclasses import dataclass

import pytest

from business_api.db.models import Location
from business_api.services.child_service import BusinessChildService

pytestmark = pytest.mark.asyncio

OWNER = "Sample Business #1"


@dataclass
class ChildCase:
    collection: str
    kind: str
    seeded: int
    created: dict
    updated: dict
    invalid: dict


CASES = [
    ChildCase(
        collection="locations",
        kind="location",
        seeded=7,
        created={"name": "Boulder"},
        updated={"name": "Longmont"},
        invalid={},
    ),
    # Sample Business #1 has no Sunday hours
    ChildCase(
        collection="hours",
        kind="hour",
        seeded=5,
        created={"dayOfWeek": 0, "open": 10, "close": 14},
        updated={"dayOfWeek": 0, "open": 11, "close": 15},
        invalid={"dayOfWeek": 0, "open": 14, "close": 10},
    ),
    ChildCase(
        collection="services",
        kind="service",
        seeded=3,
        created={"name": "Window Washing"},
        updated={"name": "Gutter Cleaning"},
        invalid={"name": ""},
    ),
    ChildCase(
        collection="reviews",
        kind="review",
        seeded=3,
        created={"rating": 4.5, "comment": "Great"},
        updated={"rating": 1, "comment": "Changed my mind"},
        invalid={"rating": 5.5},
    ),
]


@pytest.fixture(params=CASES, ids=lambda case: case.collection)
def case(request) -> ChildCase:
    return request.param


@pytest.fixture
def owner_url(business_ids) -> str:
    return f"/businesses/{business_ids[OWNER]}"


def assert_fields(body: dict, expected: dict):
    for key, value in expected.items():
        assert body[key] == value


class TestChildCrud:
    """The same five operations for every collection."""

    async def test_list(self, client, owner_url, case):
        response = await client.get(f"{owner_url}/{case.collection}")
        assert response.status_code == 200
        assert len(response.json()) == case.seeded

    async def test_create_and_get(self, client, owner_url, business_ids, case):
        response = await client.post(f"{owner_url}/{case.collection}", json=case.created)
        assert response.status_code == 200
        item_id = response.json()["id"]

        response = await client.get(f"{owner_url}/{case.collection}/{item_id}")
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == item_id
        assert body["businessId"] == business_ids[OWNER]
        assert_fields(body, case.created)

        listing = (await client.get(f"{owner_url}/{case.collection}")).json()
        assert len(listing) == case.seeded + 1

    async def test_client_supplied_ids_are_ignored(self, client, owner_url, case):
        payload = {**case.created, "id": "chosen-id", "businessId": "someone-else"}
        response = await client.post(f"{owner_url}/{case.collection}", json=payload)
        assert response.json()["id"] != "chosen-id"

        body = (await client.get(f"{owner_url}/{case.collection}/{response.json()['id']}")).json()
        assert body["businessId"] != "someone-else"

    async def test_update(self, client, owner_url, case):
        item_id = (await client.post(f"{owner_url}/{case.collection}", json=case.created)).json()["id"]

        response = await client.put(f"{owner_url}/{case.collection}/{item_id}", json=case.updated)
        assert response.status_code == 200

        body = (await client.get(f"{owner_url}/{case.collection}/{item_id}")).json()
        assert_fields(body, case.updated)

    async def test_delete(self, client, owner_url, case):
        item_id = (await client.post(f"{owner_url}/{case.collection}", json=case.created)).json()["id"]

        response = await client.delete(f"{owner_url}/{case.collection}/{item_id}")
        assert response.status_code == 200

        response = await client.get(f"{owner_url}/{case.collection}/{item_id}")
        assert response.status_code == 404
        assert response.json() == {"error": f"The specified {case.kind} does not exist"}

        response = await client.delete(f"{owner_url}/{case.collection}/{item_id}")
        assert response.status_code == 404

    async def test_invalid_create(self, client, owner_url, case):
        response = await client.post(f"{owner_url}/{case.collection}", json=case.invalid)
        assert response.status_code == 400

        listing = (await client.get(f"{owner_url}/{case.collection}")).json()
        assert len(listing) == case.seeded

    async def test_invalid_update(self, client, owner_url, case):
        item_id = (await client.post(f"{owner_url}/{case.collection}", json=case.created)).json()["id"]

        response = await client.put(f"{owner_url}/{case.collection}/{item_id}", json=case.invalid)
        assert response.status_code == 400

        body = (await client.get(f"{owner_url}/{case.collection}/{item_id}")).json()
        assert_fields(body, case.created)

    async def test_missing_child(self, client, owner_url, case):
        url = f"{owner_url}/{case.collection}/does-not-exist"
        assert (await client.get(url)).status_code == 404
        assert (await client.put(url, json=case.updated)).status_code == 404
        assert (await client.delete(url)).status_code == 404

    async def test_missing_business(self, client, case):
        url = f"/businesses/does-not-exist/{case.collection}"
        for response in (
            await client.get(url),
            await client.post(url, json=case.created),
            await client.get(f"{url}/any-id"),
            await client.put(f"{url}/any-id", json=case.updated),
            await client.delete(f"{url}/any-id"),
        ):
            assert response.status_code == 404
            assert response.json() == {"error": "The specified business does not exist"}

    async def test_child_of_another_business(self, client, owner_url, business_ids, case):
        """A child id is only reachable under the business that owns it."""
        item_id = (await client.post(f"{owner_url}/{case.collection}", json=case.created)).json()["id"]
        other_url = f"/businesses/{business_ids['Sample Business #3']}/{case.collection}/{item_id}"

        assert (await client.get(other_url)).status_code == 404
        assert (await client.delete(other_url)).status_code == 404
        assert (await client.get(f"{owner_url}/{case.collection}/{item_id}")).status_code == 200


class TestChildOrdering:

    async def test_locations_by_name(self, client, owner_url):
        await client.post(f"{owner_url}/locations", json={"name": "Aardvark"})
        names = [item["name"] for item in (await client.get(f"{owner_url}/locations")).json()]
        assert names[0] == "Aardvark"
        assert names == sorted(names)

    async def test_hours_by_day(self, client, owner_url):
        await client.post(f"{owner_url}/hours", json={"dayOfWeek": 6, "open": 9, "close": 12})
        await client.post(f"{owner_url}/hours", json={"dayOfWeek": 0, "open": 9, "close": 12})
        days = [item["dayOfWeek"] for item in (await client.get(f"{owner_url}/hours")).json()]
        assert days == [0, 1, 2, 3, 4, 5, 6]

    async def test_reviews_by_creation(self, client, owner_url):
        await client.post(f"{owner_url}/reviews", json={"rating": 0.5})
        ratings = [item["rating"] for item in (await client.get(f"{owner_url}/reviews")).json()]
        assert ratings == [4.5, 4, 4, 0.5]


class TestChildConstraints:

    async def test_duplicate_location_name(self, client, owner_url):
        response = await client.post(f"{owner_url}/locations", json={"name": "Denver"})
        assert response.status_code == 400

    async def test_same_location_name_under_another_business(self, client, business_ids):
        url = f"/businesses/{business_ids['Sample Business #3']}/locations"
        response = await client.post(url, json={"name": "Lakewood"})
        assert response.status_code == 200

    async def test_second_interval_for_a_day(self, client, owner_url):
        response = await client.post(
            f"{owner_url}/hours", json={"dayOfWeek": 1, "open": 18, "close": 20}
        )
        assert response.status_code == 400

    async def test_hours_missing_fields(self, client, owner_url):
        response = await client.post(f"{owner_url}/hours", json={"dayOfWeek": 1})
        assert response.status_code == 400
        assert "open" in response.json()["error"]


class TestReviewComments:
    """Updating a review replaces the comment only when one is sent."""

    async def test_rating_only_keeps_comment(self, client, owner_url):
        item_id = (await client.post(
            f"{owner_url}/reviews", json={"rating": 3, "comment": "Okay"}
        )).json()["id"]

        await client.put(f"{owner_url}/reviews/{item_id}", json={"rating": 4})
        body = (await client.get(f"{owner_url}/reviews/{item_id}")).json()
        assert body["rating"] == 4
        assert body["comment"] == "Okay"

    async def test_null_comment_clears_it(self, client, owner_url):
        item_id = (await client.post(
            f"{owner_url}/reviews", json={"rating": 3, "comment": "Okay"}
        )).json()["id"]

        await client.put(f"{owner_url}/reviews/{item_id}", json={"rating": 3, "comment": None})
        body = (await client.get(f"{owner_url}/reviews/{item_id}")).json()
        assert body["comment"] is None

    async def test_review_changes_avg_rating(self, client, owner_url):
        await client.post(f"{owner_url}/reviews", json={"rating": 0})
        body = (await client.get(owner_url)).json()
        # (4.5 + 4 + 4 + 0) / 4
        assert body["avgRating"] == 3.1


class TestChildServiceContract:
    """Collections must provide validate(), build() and changes()."""

    async def test_base_class_is_abstract(self, session):
        with pytest.raises(TypeError):
            BusinessChildService(session)

    async def test_incomplete_collection_service(self, session):
        class NamelessService(BusinessChildService[Location]):
            model = Location
            kind = "location"

            def validate(self, payload):
                pass

        with pytest.raises(TypeError):
            NamelessService(session)
