"""Tests for engine.playback.PlaybackController."""

import pytest

from algorithms import Algorithm, generate
from algorithms.step import Step, TourPayload, Trace
from engine import FrameScheduler, PlaybackController, PlaybackStatus, TimerScheduler
from errors import SchedulerCallbackError


def single_step_trace():
    return Trace("single", (Step(0, "only step", TourPayload(), is_final=True),))


@pytest.fixture
def trace(mst_graph):
    return generate(Algorithm.KRUSKAL, mst_graph)


@pytest.fixture
def controller(trace, loop):
    return PlaybackController(trace, scheduler=TimerScheduler(loop), speed_ms=100)


class TestInitialState:
    def test_fresh_controller_is_idle_at_zero(self, controller):
        assert controller.status is PlaybackStatus.IDLE
        assert controller.cursor == 0
        assert controller.current_step.step_number == 0
        assert controller.error is None

    def test_single_step_trace_starts_idle(self, loop):
        c = PlaybackController(single_step_trace(), scheduler=TimerScheduler(loop))
        assert c.status is PlaybackStatus.IDLE
        assert c.cursor == c.last_index

    def test_single_step_trace_is_idle_again_after_reset(self, loop):
        c = PlaybackController(single_step_trace(), scheduler=TimerScheduler(loop))
        c.start()
        c.reset()
        assert c.status is PlaybackStatus.IDLE
        assert c.cursor == c.last_index

    def test_ids_are_unique(self, trace, loop):
        a = PlaybackController(trace, scheduler=TimerScheduler(loop))
        b = PlaybackController(trace, scheduler=TimerScheduler(loop))
        assert a.id != b.id

    @pytest.mark.parametrize("speed", [0, -5, 1.5, True, "fast"])
    def test_rejects_bad_speed(self, trace, loop, speed):
        with pytest.raises(ValueError):
            PlaybackController(trace, scheduler=TimerScheduler(loop), speed_ms=speed)


class TestPlaying:
    def test_plays_to_completion_one_step_per_tick(self, controller, loop, trace):
        cursors = []
        controller.subscribe(lambda state, step: cursors.append(state.cursor))
        assert controller.start() is True
        assert controller.status is PlaybackStatus.PLAYING

        loop.advance(100 * (len(trace) - 1))
        assert controller.status is PlaybackStatus.COMPLETE
        assert controller.cursor == len(trace) - 1
        # first notification is the start itself
        assert cursors == list(range(len(trace)))
        assert loop.pending == 0

    def test_cursor_never_skips(self, controller, loop):
        cursors = []
        controller.subscribe(lambda state, step: cursors.append(state.cursor))
        controller.start()
        loop.advance(350)
        assert cursors == [0, 1, 2, 3]

    def test_listener_receives_matching_step(self, controller, loop):
        pairs = []
        controller.subscribe(lambda state, step: pairs.append((state.cursor, step.step_number)))
        controller.start()
        loop.advance(300)
        assert all(c == n for c, n in pairs)

    def test_start_while_playing_is_refused(self, controller):
        controller.start()
        assert controller.start() is False

    def test_start_from_complete_rewinds(self, controller, loop, trace):
        controller.start()
        loop.advance(100 * len(trace))
        assert controller.status is PlaybackStatus.COMPLETE
        controller.start()
        assert controller.cursor == 0
        assert controller.status is PlaybackStatus.PLAYING

    def test_single_step_trace_completes_immediately(self, loop):
        c = PlaybackController(single_step_trace(), scheduler=TimerScheduler(loop))
        c.start()
        assert c.status is PlaybackStatus.COMPLETE
        assert loop.pending == 0

    def test_frame_scheduler_plays_too(self, trace, loop):
        c = PlaybackController(trace, scheduler=FrameScheduler(loop), speed_ms=50)
        c.start()
        loop.run_until_idle()
        assert c.status is PlaybackStatus.COMPLETE
        assert c.cursor == len(trace) - 1


class TestPause:
    def test_pause_stops_advancing(self, controller, loop):
        controller.start()
        loop.advance(250)
        assert controller.pause() is True
        assert controller.status is PlaybackStatus.PAUSED
        at = controller.cursor
        loop.advance(10_000)
        assert controller.cursor == at
        assert loop.pending == 0

    def test_pause_when_not_playing(self, controller):
        assert controller.pause() is False

    def test_resume_continues_from_cursor(self, controller, loop):
        controller.start()
        loop.advance(200)
        controller.pause()
        controller.start()
        loop.advance(100)
        assert controller.cursor == 3

    def test_toggle(self, controller):
        controller.toggle_play()
        assert controller.is_playing
        controller.toggle_play()
        assert controller.status is PlaybackStatus.PAUSED


class TestManualStepping:
    def test_step_forward_from_idle_pauses(self, controller):
        assert controller.step_forward() is True
        assert controller.cursor == 1
        assert controller.status is PlaybackStatus.PAUSED

    def test_stepping_while_playing_is_refused(self, controller):
        controller.start()
        assert controller.step_forward() is False
        assert controller.step_backward() is False
        assert controller.cursor == 0

    def test_step_to_last_completes(self, controller, trace):
        for _ in range(len(trace) - 1):
            controller.step_forward()
        assert controller.status is PlaybackStatus.COMPLETE
        assert controller.step_forward() is False

    def test_step_back_from_complete_pauses(self, controller, trace):
        controller.seek(len(trace) - 1)
        assert controller.status is PlaybackStatus.COMPLETE
        assert controller.step_backward() is True
        assert controller.status is PlaybackStatus.PAUSED

    def test_step_backward_at_start(self, controller):
        assert controller.step_backward() is False

    def test_seek(self, controller, trace):
        assert controller.seek(5) is True
        assert controller.cursor == 5
        with pytest.raises(IndexError):
            controller.seek(len(trace))

    def test_seek_while_playing_is_refused(self, controller):
        controller.start()
        assert controller.seek(3) is False


class TestSpeed:
    def test_new_speed_applies_to_pending_advance(self, controller, loop):
        controller.start()
        loop.advance(50)
        controller.set_speed(1000)
        loop.advance(100)
        assert controller.cursor == 0
        loop.advance(900)
        assert controller.cursor == 1
        assert loop.pending == 1

    def test_preset(self, controller):
        controller.set_speed_preset("fast")
        assert controller.speed_ms == 150

    def test_unknown_preset(self, controller):
        with pytest.raises(ValueError):
            controller.set_speed_preset("ludicrous")

    @pytest.mark.parametrize("speed", [0, -1, 2.5])
    def test_invalid_speed(self, controller, speed):
        with pytest.raises(ValueError):
            controller.set_speed(speed)
        assert controller.speed_ms == 100


class TestResetAndLoad:
    def test_reset(self, controller, loop):
        controller.start()
        loop.advance(300)
        controller.reset()
        assert controller.status is PlaybackStatus.IDLE
        assert controller.cursor == 0
        loop.advance(1000)
        assert controller.cursor == 0

    def test_load_swaps_trace(self, controller, loop, hit_cog):
        controller.start()
        loop.advance(200)
        new_trace = generate(Algorithm.WORD_LADDER, hit_cog)
        controller.load(new_trace)
        assert controller.trace is new_trace
        assert controller.status is PlaybackStatus.IDLE
        assert controller.cursor == 0
        assert loop.pending == 0


class TestErrors:
    def test_listener_error_pauses_and_reports(self, controller, loop):
        errors = []
        controller.subscribe_errors(errors.append)

        def fragile(state, step):
            if state.cursor == 2:
                raise RuntimeError("render failed")

        controller.subscribe(fragile)
        controller.start()
        loop.advance(1000)

        assert controller.status is PlaybackStatus.PAUSED
        assert controller.cursor == 2
        assert len(errors) == 1
        assert isinstance(errors[0], SchedulerCallbackError)
        assert errors[0].controller_id == controller.id
        assert controller.error is errors[0]
        assert loop.pending == 0

    def test_restart_clears_error(self, controller, loop):
        controller.report_error(RuntimeError("boom"))
        assert controller.error is not None
        controller.start()
        assert controller.error is None

    def test_unsubscribe(self, controller, loop):
        seen = []
        unsubscribe = controller.subscribe(lambda state, step: seen.append(state.cursor))
        controller.step_forward()
        unsubscribe()
        controller.step_forward()
        assert seen == [1]

    def test_unsubscribe_twice_is_harmless(self, controller):
        seen = []
        unsubscribe = controller.subscribe(lambda state, step: seen.append(state.cursor))
        unsubscribe()
        unsubscribe()
        controller.step_forward()
        assert seen == []

    def test_unsubscribe_errors(self, controller):
        errors = []
        unsubscribe = controller.subscribe_errors(errors.append)
        unsubscribe()
        controller.report_error(RuntimeError("boom"))
        assert errors == []
        assert controller.error is not None


class TestDispose:
    def test_dispose_cancels_and_locks(self, controller, loop):
        controller.start()
        controller.dispose()
        assert controller.disposed
        assert loop.pending == 0
        with pytest.raises(RuntimeError):
            controller.start()
