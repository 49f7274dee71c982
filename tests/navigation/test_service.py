from __future__ import annotations

import logging
import threading

import pytest

from tacnav.navigation.obstacles import Obstacle
from tacnav.navigation.service import (
    NavigationConfig,
    NavigationService,
    register_navigation_metrics,
)
from tacnav.util.clock import SimulationClock
from tacnav.util.live_vars import live_variable_registry


def _service(
    layout: list[Obstacle] | None = None,
    *,
    thread_safe: bool = False,
    config: NavigationConfig | None = None,
) -> tuple[NavigationService, SimulationClock, list[Obstacle]]:
    clock = SimulationClock()
    obstacles = layout if layout is not None else []
    service = NavigationService(
        320, 320, lambda: obstacles, clock.now_ms, config, thread_safe=thread_safe
    )
    return service, clock, obstacles


def test_registers_navigation_metrics() -> None:
    _service()
    assert live_variable_registry.get_variable("nav.astar.time_ms") is not None
    assert live_variable_registry.get_variable("nav.grid.rebuild_ms") is not None
    assert live_variable_registry.get_variable("cache.path.stats") is not None


def test_metric_registration_is_idempotent() -> None:
    _service()
    _service()
    window = live_variable_registry.samples("nav.astar.time_ms")
    register_navigation_metrics()
    assert window is not None
    assert live_variable_registry.samples("nav.astar.time_ms") is window


def test_config_flows_into_grid_and_planner() -> None:
    service, _, _ = _service(
        config=NavigationConfig(cell_size=32, cache_capacity=3, padding=0)
    )
    assert (service.grid.width, service.grid.height) == (10, 10)
    assert service.grid.padding == 0
    assert service.planner.cache.max_size == 3


def test_find_path_builds_grid_lazily() -> None:
    service, _, _ = _service()
    assert not service.grid.is_built
    path = service.find_path((8, 8), (40, 8))
    assert path == [(8.0, 8.0), (24.0, 8.0), (40.0, 8.0)]
    assert service.grid.is_built


def test_direction_to_goal() -> None:
    service, _, _ = _service()
    assert service.get_direction_to_goal((8, 8), (88, 8)) == (1.0, 0.0)


def test_unforced_rebuild_respects_interval() -> None:
    service, clock, _ = _service()
    assert service.rebuild_grid() is True
    assert service.rebuild_grid() is False
    clock.advance(500)
    assert service.rebuild_grid() is True


def test_forced_rebuild_sees_new_obstacles_and_drops_cache() -> None:
    service, _, layout = _service()
    before = service.find_path((40, 160), (280, 160))
    assert all(y == 168.0 for _, y in before)  # Straight across

    layout.append(Obstacle(160, 160, 32, 32))
    assert service.rebuild_grid(force=True) is True
    assert len(service.planner.cache) == 0

    after = service.find_path((40, 160), (280, 160))
    assert after != before
    assert not service.grid.is_walkable(10, 10)


def test_find_nearest_walkable() -> None:
    service, _, _ = _service([Obstacle(160, 160, 32, 32)])
    assert service.find_nearest_walkable((40, 40)) == (40.0, 40.0)
    assert service.find_nearest_walkable((160, 160)) == (136.0, 200.0)


def test_services_do_not_share_caches() -> None:
    first, _, _ = _service()
    second, _, _ = _service()
    first.find_path((8, 8), (200, 200))
    assert len(first.planner.cache) == 1
    assert len(second.planner.cache) == 0


def test_thread_safe_service_serves_concurrent_queries() -> None:
    service, _, _ = _service([Obstacle(160, 160, 32, 32)], thread_safe=True)
    assert service.thread_safe
    results: list[list[tuple[float, float]]] = []

    def worker() -> None:
        for _ in range(20):
            results.append(service.find_path((40, 160), (280, 160)))
            service.rebuild_grid(force=True)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(results) == 80
    assert all(path == results[0] for path in results)
    assert results[0]


def test_stats_before_any_query() -> None:
    service, _, _ = _service()
    stats = service.stats()
    assert stats.searches_run == 0
    assert stats.cached_paths == 0
    assert stats.grid_builds == 0
    assert stats.walkable_fraction == 0.0
    assert stats.cache_hit_rate == 0.0
    assert stats.search_ms_p50 == 0.0


def test_stats_track_searches_and_cache_hits() -> None:
    service, _, _ = _service([Obstacle(160, 160, 32, 32)])
    for _ in range(3):
        service.find_path((40, 160), (280, 160))

    stats = service.stats()
    assert stats.searches_run == 1
    assert stats.cached_paths == 1
    assert (stats.cache_hits, stats.cache_misses) == (2, 1)
    assert stats.cache_hit_rate == pytest.approx(2 / 3)
    assert stats.grid_builds == 1
    assert 0.0 < stats.walkable_fraction < 1.0
    assert stats.search_ms_p95 >= stats.search_ms_p50 >= 0.0
    window = live_variable_registry.samples("nav.astar.time_ms")
    assert window is not None and window.sample_count == 1


def test_repr_reports_search_activity() -> None:
    service, _, _ = _service()
    service.find_path((8, 8), (200, 200))
    service.find_path((8, 8), (200, 200))
    text = repr(service)
    assert "searches=1" in text
    assert "cached_paths=1" in text
    assert "hit_rate=50.0%" in text


def test_forced_rebuild_logs_dropped_cache(caplog: pytest.LogCaptureFixture) -> None:
    service, _, _ = _service()
    service.find_path((8, 8), (200, 200))
    with caplog.at_level(logging.DEBUG, logger="tacnav.navigation.service"):
        service.rebuild_grid(force=True)
    assert "dropping 1 cached paths (0 hits, 1 misses" in caplog.text
