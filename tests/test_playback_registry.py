"""Tests for engine.registry.PlaybackRegistry."""

import pytest

from algorithms import Algorithm, generate
from engine import PlaybackController, PlaybackRegistry, PlaybackStatus, TimerScheduler


@pytest.fixture
def trace(mst_graph):
    return generate(Algorithm.KRUSKAL, mst_graph)


@pytest.fixture
def registry():
    return PlaybackRegistry()


@pytest.fixture
def make(trace, loop, registry):
    def _make(**kwargs):
        return PlaybackController(trace, scheduler=TimerScheduler(loop), registry=registry, **kwargs)
    return _make


class TestMembership:
    def test_register_on_create(self, make, registry):
        a, b = make(), make()
        assert registry.active_ids() == [a.id, b.id]
        assert registry.get(a.id) is a
        assert len(registry) == 2

    def test_unregister_on_dispose(self, make, registry):
        a = make()
        a.dispose()
        assert a.id not in registry
        assert registry.get(a.id) is None
        assert registry.unregister(a.id) is False

    def test_duplicate_id(self, make):
        make(controller_id="same")
        with pytest.raises(ValueError):
            make(controller_id="same")


class TestExclusivePlayback:
    def test_starting_one_pauses_the_others(self, make):
        a, b = make(), make()
        a.start()
        b.start()
        assert a.status is PlaybackStatus.PAUSED
        assert b.status is PlaybackStatus.PLAYING

    def test_non_exclusive_registry(self, trace, loop):
        registry = PlaybackRegistry(exclusive=False)
        a = PlaybackController(trace, scheduler=TimerScheduler(loop), registry=registry)
        b = PlaybackController(trace, scheduler=TimerScheduler(loop), registry=registry)
        a.start()
        b.start()
        assert a.is_playing and b.is_playing


class TestBulkActions:
    def test_pause_all(self, make, registry, loop):
        a, b = make(), make()
        a.start()
        registry.pause_all()
        assert a.status is PlaybackStatus.PAUSED
        assert b.status is PlaybackStatus.IDLE
        assert loop.pending == 0

    def test_reset_all(self, make, registry):
        a, b = make(), make()
        a.step_forward()
        b.step_forward()
        registry.reset_all()
        assert a.cursor == b.cursor == 0
        assert a.status is b.status is PlaybackStatus.IDLE

    def test_failure_in_one_controller_is_isolated(self, trace, loop):
        registry = PlaybackRegistry(exclusive=False)
        a, b, c = (
            PlaybackController(trace, scheduler=TimerScheduler(loop), registry=registry)
            for _ in range(3)
        )
        errors = []
        b.subscribe_errors(errors.append)

        def explode(state, step):
            if state.status is PlaybackStatus.PAUSED:
                raise RuntimeError("cannot repaint")

        b.subscribe(explode)
        for ctrl in (a, b, c):
            ctrl.start()
        registry.pause_all()

        assert a.status is PlaybackStatus.PAUSED
        assert b.status is PlaybackStatus.PAUSED
        assert c.status is PlaybackStatus.PAUSED
        assert len(errors) == 1
        assert errors[0].controller_id == b.id
        assert isinstance(errors[0].__cause__, RuntimeError)
        assert loop.pending == 0
