from __future__ import annotations

import logging
import threading

import numpy as np
import pytest

from mandelview import renderer
from mandelview.colormaps import build_palette
from mandelview.compute import scan_pixels
from mandelview.renderer import PixelBuffer, RenderCoordinator, ScanState
from mandelview.viewport import ViewState, plane_rect

TIMEOUT = 30.0


class _AlwaysClear:
    def is_set(self) -> bool:
        return False


def _reference_pixels(view: ViewState, width: int, height: int) -> np.ndarray:
    buffer = PixelBuffer(width, height)
    palette = build_palette(view.palette, view.max_iterations)
    assert scan_pixels(plane_rect(view), view.max_iterations, palette, buffer, _AlwaysClear())
    return buffer.copy()[0]


@pytest.fixture
def coordinator():
    coord = RenderCoordinator(8, 6)
    yield coord
    coord.close(timeout=TIMEOUT)


def test_new_coordinator_is_idle(coordinator: RenderCoordinator) -> None:
    snapshot = coordinator.current_snapshot()
    assert coordinator.state is ScanState.IDLE
    assert snapshot.view is None
    assert snapshot.pixels.shape == (6, 8, 3)


def test_request_fills_buffer_and_returns_to_idle(coordinator: RenderCoordinator) -> None:
    view = ViewState(max_iterations=32)
    coordinator.request_recompute(view)
    assert coordinator.state is ScanState.SCANNING

    assert coordinator.wait_until_idle(TIMEOUT)
    snapshot = coordinator.current_snapshot()
    assert snapshot.state is ScanState.IDLE
    assert snapshot.view == view
    assert snapshot.cursor == (7, 5)
    np.testing.assert_array_equal(snapshot.pixels, _reference_pixels(view, 8, 6))


def test_latest_request_wins() -> None:
    coord = RenderCoordinator(64, 48)
    try:
        slow = ViewState(max_iterations=1 << 16)
        final = ViewState(zoom=2.0, block_x=1, max_iterations=50, palette="Ocean")
        coord.request_recompute(slow)
        coord.request_recompute(ViewState(zoom=1.5, max_iterations=1000))
        coord.request_recompute(final)

        assert coord.wait_until_idle(TIMEOUT)
        snapshot = coord.current_snapshot()
        assert snapshot.view == final
        np.testing.assert_array_equal(snapshot.pixels, _reference_pixels(final, 64, 48))
    finally:
        coord.close(timeout=TIMEOUT)


def test_running_scan_is_cancelled_by_new_request(monkeypatch, coordinator: RenderCoordinator) -> None:
    started = threading.Event()
    outcomes: dict[int, bool] = {}

    def _fake_scan(rect, max_iter, palette, buffer, cancel):
        if max_iter == 100:
            started.set()
            outcomes[max_iter] = cancel.wait(TIMEOUT)
            return False
        outcomes[max_iter] = cancel.is_set()
        return True

    monkeypatch.setattr(renderer, "scan_pixels", _fake_scan)

    coordinator.request_recompute(ViewState(max_iterations=100))
    assert started.wait(TIMEOUT)
    coordinator.request_recompute(ViewState(max_iterations=200))

    assert coordinator.wait_until_idle(TIMEOUT)
    assert outcomes == {100: True, 200: False}
    assert coordinator.view == ViewState(max_iterations=200)


def test_never_more_than_one_scan_active(monkeypatch) -> None:
    lock = threading.Lock()
    active = {"now": 0, "max": 0}
    scanned = []

    def _tracking_scan(rect, max_iter, palette, buffer, cancel):
        with lock:
            active["now"] += 1
            active["max"] = max(active["max"], active["now"])
        try:
            scanned.append(max_iter)
            return scan_pixels(rect, max_iter, palette, buffer, cancel)
        finally:
            with lock:
                active["now"] -= 1

    monkeypatch.setattr(renderer, "scan_pixels", _tracking_scan)

    coord = RenderCoordinator(32, 24)
    try:
        for n in range(1, 40):
            coord.request_recompute(ViewState(max_iterations=n * 100))
        assert coord.wait_until_idle(TIMEOUT)
    finally:
        coord.close(timeout=TIMEOUT)

    assert active["max"] == 1
    assert scanned[-1] == 3900


def test_palette_rebuilt_only_when_it_changes(monkeypatch, coordinator: RenderCoordinator) -> None:
    calls = []

    def _counting_build(name, max_iterations):
        calls.append((name, max_iterations))
        return build_palette(name, max_iterations)

    monkeypatch.setattr(renderer, "build_palette", _counting_build)

    for view in (
        ViewState(max_iterations=16),
        ViewState(block_x=1, max_iterations=16),
        ViewState(max_iterations=32),
        ViewState(max_iterations=32, palette="Hot"),
    ):
        coordinator.request_recompute(view)
        assert coordinator.wait_until_idle(TIMEOUT)

    assert calls == [("Grid", 16), ("Grid", 32), ("Hot", 32)]


def test_failed_scan_is_logged_and_worker_keeps_running(monkeypatch, caplog, coordinator: RenderCoordinator) -> None:
    state = {"n": 0}

    def _flaky_scan(rect, max_iter, palette, buffer, cancel):
        state["n"] += 1
        if state["n"] == 1:
            raise RuntimeError("boom")
        return scan_pixels(rect, max_iter, palette, buffer, cancel)

    monkeypatch.setattr(renderer, "scan_pixels", _flaky_scan)

    with caplog.at_level(logging.ERROR, logger="mandelview.renderer"):
        coordinator.request_recompute(ViewState(max_iterations=8))
        assert coordinator.wait_until_idle(TIMEOUT)
        assert "Scan failed" in caplog.text

    view = ViewState(max_iterations=12)
    coordinator.request_recompute(view)
    assert coordinator.wait_until_idle(TIMEOUT)
    np.testing.assert_array_equal(coordinator.current_snapshot().pixels, _reference_pixels(view, 8, 6))


def test_snapshot_is_a_copy(coordinator: RenderCoordinator) -> None:
    coordinator.request_recompute(ViewState(max_iterations=8))
    assert coordinator.wait_until_idle(TIMEOUT)
    snapshot = coordinator.current_snapshot()
    snapshot.pixels[:] = 0
    assert coordinator.current_snapshot().pixels.any()


def test_closed_coordinator_rejects_requests() -> None:
    coord = RenderCoordinator(4, 4)
    coord.close(timeout=TIMEOUT)
    assert not coord._thread.is_alive()
    assert coord.state is ScanState.IDLE
    with pytest.raises(RuntimeError):
        coord.request_recompute(ViewState())


@pytest.mark.parametrize("size", [(0, 4), (4, 0), (-1, 3)])
def test_buffer_rejects_empty_size(size: tuple[int, int]) -> None:
    with pytest.raises(ValueError):
        PixelBuffer(*size)
