"""
End-to-end tests for the facing direction engine with in-memory providers.
"""

import asyncio
import logging

import pytest

from conftest import FakeGeocoder, FakeSpatialProvider, candidate
from house_facing.core.cancellation import CancellationToken, SearchCancelled
from house_facing.core.utils.geo import DirectionResult
from house_facing.geocoding.base import AddressNotFoundError
from house_facing.inference.base import DirectionIndeterminate, Provenance
from house_facing.inference.orchestrator import FacingDirectionEngine
from house_facing.spatial.base import SpatialElement
from house_facing.spatial.query import FeatureKind


ADDRESS = "123 Main St"


def make_engine(spatial, cache, geocoder=None, strategy_timeout=1.0):
    geocoder = geocoder or FakeGeocoder({ADDRESS: [candidate()]})
    return FacingDirectionEngine(
        geocoder=geocoder,
        spatial_provider=spatial,
        cache=cache,
        strategy_timeout=strategy_timeout,
        country_suffix="USA",
    )


def building_of(points):
    return SpatialElement(osm_type="way", osm_id=1, points=tuple(points))


def test_building_with_road_faces_the_road(rectangle, road_north, cache):
    engine = make_engine(FakeSpatialProvider(buildings=[building_of(rectangle)], roads=[road_north]), cache)

    result = asyncio.run(engine.search(ADDRESS))

    assert result == DirectionResult("North", 0)
    assert engine.last_report.label == "123 Main St, Springfield"
    assert engine.last_report.provenance is Provenance.BUILDING_EDGE


def test_building_without_roads_uses_longest_edge(rectangle, cache):
    engine = make_engine(FakeSpatialProvider(buildings=[building_of(rectangle)], roads=[]), cache)

    assert asyncio.run(engine.search(ADDRESS)) == DirectionResult("East", 100)
    assert engine.last_report.provenance is Provenance.LONGEST_EDGE


def test_finished_search_logs_producing_heuristic(rectangle, cache, caplog):
    caplog.set_level(logging.INFO, logger="house_facing.inference.orchestrator")
    engine = make_engine(FakeSpatialProvider(buildings=[building_of(rectangle)], roads=[]), cache)

    asyncio.run(engine.search(ADDRESS))

    assert any("via longest_edge" in message for message in caplog.messages)


def test_no_building_falls_back_to_street(road_north, cache):
    spatial = FakeSpatialProvider(buildings=[], roads=[road_north])
    engine = make_engine(spatial, cache)

    assert asyncio.run(engine.search(ADDRESS)) == DirectionResult("North", 0)
    assert engine.last_report.provenance is Provenance.STREET
    assert [q.kind for q in spatial.calls] == [FeatureKind.BUILDING, FeatureKind.HIGHWAY]


def test_repeated_search_is_served_from_cache(road_north, cache):
    geocoder = FakeGeocoder({ADDRESS: [candidate()]})
    spatial = FakeSpatialProvider(buildings=[], roads=[road_north])
    engine = make_engine(spatial, cache, geocoder=geocoder)

    async def search_twice():
        first = await engine.search(ADDRESS)
        geocoder_calls, spatial_calls = len(geocoder.calls), len(spatial.calls)
        second = await engine.search(" 123 MAIN ST ")
        assert len(geocoder.calls) == geocoder_calls
        assert len(spatial.calls) == spatial_calls
        return first, second

    first, second = asyncio.run(search_twice())

    assert first == second
    assert cache.get("123 main st") is not None
    assert engine.last_report.provenance is Provenance.STREET
    assert {p.value for p in Provenance} == {"building", "longest_edge", "street"}


def test_spatial_outage_is_direction_indeterminate_and_not_cached(cache, spatial_outage):
    engine = make_engine(FakeSpatialProvider(buildings=spatial_outage, roads=spatial_outage), cache)

    with pytest.raises(DirectionIndeterminate):
        asyncio.run(engine.search(ADDRESS))

    assert cache.get("123 main st") is None
    assert engine.last_report is None


def test_no_street_data_escalates(cache):
    engine = make_engine(FakeSpatialProvider(buildings=[], roads=[]), cache)

    with pytest.raises(DirectionIndeterminate) as exc_info:
        asyncio.run(engine.search(ADDRESS))
    assert "Try another address" in exc_info.value.message


def test_unknown_address_surfaces_address_not_found(cache):
    geocoder = FakeGeocoder({})
    spatial = FakeSpatialProvider()
    engine = make_engine(spatial, cache, geocoder=geocoder)

    with pytest.raises(AddressNotFoundError):
        asyncio.run(engine.search("999 Nowhere Rd"))

    assert geocoder.calls == ["999 Nowhere Rd", "999 Nowhere Rd, USA"]
    assert spatial.calls == []


def test_slow_building_strategy_times_out_into_street(road_north, rectangle, cache):
    spatial = FakeSpatialProvider(
        buildings=[building_of(rectangle)],
        roads=[road_north],
        delays={FeatureKind.BUILDING: 5.0},
    )
    engine = make_engine(spatial, cache, strategy_timeout=0.05)

    assert asyncio.run(engine.search(ADDRESS)) == DirectionResult("North", 0)
    assert engine.last_report.provenance is Provenance.STREET


def test_both_strategies_timing_out_is_direction_indeterminate(rectangle, road_north, cache):
    spatial = FakeSpatialProvider(
        buildings=[building_of(rectangle)],
        roads=[road_north],
        delays={FeatureKind.BUILDING: 5.0, FeatureKind.HIGHWAY: 5.0},
    )
    engine = make_engine(spatial, cache, strategy_timeout=0.05)

    with pytest.raises(DirectionIndeterminate):
        asyncio.run(engine.search(ADDRESS))
    assert len(cache) == 0


@pytest.mark.parametrize("address", ["", "   "])
def test_empty_address_is_rejected(address, cache):
    geocoder = FakeGeocoder()
    engine = make_engine(FakeSpatialProvider(), cache, geocoder=geocoder)

    with pytest.raises(ValueError):
        asyncio.run(engine.search(address))
    assert geocoder.calls == []


def test_new_search_supersedes_in_flight_search(road_north, cache):
    geocoder = FakeGeocoder(
        {
            "1 First St": [candidate(label="1 First St")],
            "2 Second St": [candidate(label="2 Second St")],
        },
        delay=0.1,
    )
    engine = make_engine(FakeSpatialProvider(roads=[road_north]), cache, geocoder=geocoder)

    async def overlapping_searches():
        first = asyncio.ensure_future(engine.search("1 First St"))
        await asyncio.sleep(0.02)
        second = await engine.search("2 Second St")
        return await first, second

    first, second = asyncio.run(overlapping_searches())

    assert first is None
    assert second == DirectionResult("North", 0)
    assert cache.get("1 first st") is None
    assert cache.get("2 second st") is not None
    assert engine.last_report.label == "2 Second St"


def test_cancel_in_flight_is_silent(road_north, cache):
    geocoder = FakeGeocoder({ADDRESS: [candidate()]}, delay=0.1)
    engine = make_engine(FakeSpatialProvider(roads=[road_north]), cache, geocoder=geocoder)

    async def cancel_midway():
        search = asyncio.ensure_future(engine.search(ADDRESS))
        await asyncio.sleep(0.02)
        engine.cancel_in_flight()
        return await search

    assert asyncio.run(cancel_midway()) is None
    assert len(cache) == 0
    assert engine.last_report is None


def test_cancelling_the_caller_propagates(road_north, cache):
    geocoder = FakeGeocoder({ADDRESS: [candidate()]}, delay=0.5)
    engine = make_engine(FakeSpatialProvider(roads=[road_north]), cache, geocoder=geocoder)

    async def cancel_caller():
        search = asyncio.ensure_future(engine.search(ADDRESS))
        await asyncio.sleep(0.02)
        search.cancel()
        with pytest.raises(asyncio.CancelledError):
            await search

    asyncio.run(cancel_caller())
    assert len(cache) == 0


def test_cancellation_token():
    token = CancellationToken()
    token.raise_if_cancelled()

    token.cancel()
    assert token.cancelled
    with pytest.raises(SearchCancelled):
        token.raise_if_cancelled()
    assert issubclass(SearchCancelled, asyncio.CancelledError)


def test_close_closes_providers(cache):
    closed = []

    class ClosingGeocoder(FakeGeocoder):
        async def close(self):
            closed.append("geocoder")

    class ClosingSpatial(FakeSpatialProvider):
        async def close(self):
            closed.append("spatial")

    async def use_engine():
        async with make_engine(ClosingSpatial(), cache, geocoder=ClosingGeocoder()):
            pass

    asyncio.run(use_engine())
    assert closed == ["geocoder", "spatial"]
