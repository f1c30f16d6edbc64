import asyncio

import httpx

from barberzon.client.api import ApiClient, ApiError
from barberzon.client.services import ShopService
from barberzon.client.search import LatestSearch

NEARBY = [{"id": 1, "name": "Nearby Cuts"}]


def test_keystrokes_are_debounced():
    calls = []

    def search(query):
        calls.append(query)
        return [{"name": query}]

    async def scenario():
        latest = LatestSearch(search, NEARBY, delay=0.02)
        for query in ("f", "fa", "fad", "fade"):
            latest.type(query)
        await latest.wait()
        return latest

    latest = asyncio.run(scenario())
    assert calls == ["fade"]
    assert latest.results == [{"name": "fade"}]
    assert latest.loading is False


def test_stale_response_is_discarded():
    async def search(query):
        # the earlier query answers last
        await asyncio.sleep(0.2 if query == "fa" else 0.01)
        return [{"name": query}]

    async def scenario():
        latest = LatestSearch(search, NEARBY, delay=0.01)
        latest.type("fa")
        await asyncio.sleep(0.05)  # "fa" is now in flight
        latest.type("fade")
        await latest.wait()
        return latest

    latest = asyncio.run(scenario())
    assert latest.results == [{"name": "fade"}]


def test_empty_query_restores_nearby_without_a_call():
    calls = []

    def search(query):
        calls.append(query)
        return [{"name": query}]

    async def scenario():
        latest = LatestSearch(search, NEARBY, delay=0.01)
        latest.type("fade")
        await latest.wait()
        latest.type("   ")
        await latest.wait()
        return latest

    latest = asyncio.run(scenario())
    assert calls == ["fade"]
    assert latest.results == NEARBY


def test_clearing_the_query_drops_in_flight_results():
    async def search(query):
        await asyncio.sleep(0.05)
        return [{"name": query}]

    async def scenario():
        latest = LatestSearch(search, NEARBY, delay=0.01)
        latest.type("fade")
        await asyncio.sleep(0.02)
        latest.type("")
        await latest.wait()
        return latest

    assert asyncio.run(scenario()).results == NEARBY


def test_search_failure_notifies_and_keeps_results():
    messages = []

    def search(query):
        raise ApiError(500, "Something went wrong!")

    async def scenario():
        latest = LatestSearch(search, NEARBY, delay=0.01, notify=messages.append)
        latest.type("fade")
        await latest.wait()
        return latest

    latest = asyncio.run(scenario())
    assert latest.results == NEARBY
    assert messages == ["Search failed: Something went wrong!"]


def test_network_failure_clears_loading():
    messages = []

    def time_out(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    api = ApiClient(base_url="http://test/api", transport=httpx.MockTransport(time_out))
    shops = ShopService(api)

    async def scenario():
        latest = LatestSearch(lambda query: shops.get_all_shops(query=query), NEARBY, delay=0.01,
                              notify=messages.append)
        latest.type("fade")
        await latest.wait()
        return latest

    latest = asyncio.run(scenario())
    assert latest.loading is False
    assert latest.results == NEARBY
    assert messages == ["Search failed: timed out"]
