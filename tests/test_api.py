import httpx

from crag_info.core.api import API_ERROR, CRAGS_NEAR, get_area_by_uuid, get_crag_details_near
from crag_info.core.clients.graphql import GraphQLClient, GraphQLError, set_client

CRAG_A = {"__typename": "Area", "uuid": "a1", "areaName": "Lower Gorge"}
CRAG_B = {"__typename": "Area", "uuid": "b2", "areaName": "Upper Gorge"}
CRAG_C = {"__typename": "Area", "uuid": "c3", "areaName": "Dihedrals"}

NEAR_RESULT = {
    "cragsNear": [
        {"count": 2, "_id": {"$numberInt": 0}, "placeId": "p1", "crags": [CRAG_A, CRAG_B]},
        {"count": 0, "_id": {"$numberInt": 1}, "placeId": "p1", "crags": []},
        {"count": 1, "_id": {"$numberInt": 2}, "placeId": "p1", "crags": [CRAG_C]},
    ]
}


async def test_crags_near_flattens_groups(fake_client_factory):
    client = fake_client_factory(data=NEAR_RESULT)
    result = await get_crag_details_near((-121.14, 44.36), (0, 48000), "p1", True, client=client)
    assert [c["uuid"] for c in result.data] == ["a1", "b2", "c3"]
    assert result.place_id == "p1"
    assert result.error is None


async def test_crags_near_sends_variables(fake_client_factory):
    client = fake_client_factory(data=NEAR_RESULT)
    await get_crag_details_near((-121.14, 44.36), (100, 5000), client=client)
    call = client.calls[0]
    assert call["query"] == CRAGS_NEAR
    assert call["fetch_policy"] == "cache-first"
    assert call["variables"] == {
        "lng": -121.14,
        "lat": 44.36,
        "placeId": "unspecified",
        "minDistance": 100,
        "maxDistance": 5000,
        "includeCrags": False,
    }


async def test_crags_near_network_failure(fake_client_factory):
    client = fake_client_factory(error=httpx.ConnectError("connection refused"))
    result = await get_crag_details_near((0.0, 0.0), (0, 1000), "p1", client=client)
    assert result.data == []
    assert result.error == API_ERROR
    assert result.place_id is None


async def test_crags_near_graphql_failure(fake_client_factory):
    client = fake_client_factory(error=GraphQLError([{"message": "boom"}]))
    result = await get_crag_details_near((0.0, 0.0), (0, 1000), client=client)
    assert result.data == []
    assert result.error


async def test_crags_near_malformed_result(fake_client_factory):
    client = fake_client_factory(data={"somethingElse": []})
    result = await get_crag_details_near((0.0, 0.0), (0, 1000), client=client)
    assert result.data == []
    assert result.error == API_ERROR


async def test_crags_near_bad_range(fake_client_factory):
    client = fake_client_factory(data=NEAR_RESULT)
    result = await get_crag_details_near((0.0, 0.0), (), client=client)
    assert result.error == API_ERROR
    assert client.calls == []


async def test_crags_near_uses_shared_client_and_fills_cache():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"data": NEAR_RESULT}))
    set_client(GraphQLClient(url="https://example.test", transport=transport))
    result = await get_crag_details_near((-121.14, 44.36), (0, 48000), "p1")
    assert len(result.data) == 3
    assert get_area_by_uuid("c3")["areaName"] == "Dihedrals"


def test_area_by_uuid_reads_cache_key(fake_client_factory):
    client = fake_client_factory(fragments={'Area:{"uuid":"a1"}': CRAG_A})
    assert get_area_by_uuid("a1", client=client) == CRAG_A
    assert client.reads == ['Area:{"uuid":"a1"}']


def test_area_by_uuid_miss(fake_client_factory):
    assert get_area_by_uuid("nope", client=fake_client_factory()) is None


def test_area_by_uuid_failure(fake_client_factory):
    client = fake_client_factory(fragment_error=RuntimeError("cache unavailable"))
    assert get_area_by_uuid("a1", client=client) is None
