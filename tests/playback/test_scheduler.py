"""Tests for the playback scheduler."""

import pytest

from rsvp_reader.services.documents import DocumentData, build_document
from rsvp_reader.services.playback import (
    PlaybackScheduler,
    PlaybackState,
    ReadingStateChanged,
    ReadingStateData,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def document():
    """Four plain words; each dwells exactly 100 ms at 600 WPM."""
    return build_document("alpha beta gamma delta", "Words", document_id="doc-1")


@pytest.fixture
def scheduler():
    return PlaybackScheduler()


@pytest.fixture
def events(scheduler):
    received = []
    scheduler.add_change_listener(received.append)
    return received


@pytest.fixture
def frames(scheduler):
    received = []
    scheduler.add_frame_listener(received.append)
    return received


def start_playing(scheduler, document, now_ms=0.0):
    scheduler.load(document)
    scheduler.play()
    scheduler.tick(now_ms)


# =============================================================================
# Construction and idle state
# =============================================================================


class TestIdle:

    def test_initial_state(self, scheduler):
        assert scheduler.state is PlaybackState.IDLE
        assert scheduler.total == 0
        assert scheduler.current_token == ""
        assert scheduler.snapshot() is None

    def test_tick_before_load(self, scheduler):
        assert scheduler.tick(1000.0) is False

    def test_play_before_load_is_ignored(self, scheduler):
        scheduler.play()
        assert scheduler.state is PlaybackState.IDLE

    def test_seek_before_load_is_ignored(self, scheduler, events):
        scheduler.seek(3)
        scheduler.jump_to(2)
        assert scheduler.cursor == 0
        assert events == []

    @pytest.mark.parametrize("min_wpm,max_wpm", [(0, 100), (500, 400), (-1, 10)])
    def test_invalid_bounds(self, min_wpm, max_wpm):
        with pytest.raises(ValueError):
            PlaybackScheduler(min_wpm=min_wpm, max_wpm=max_wpm)


# =============================================================================
# Loading persisted state
# =============================================================================


class TestLoad:

    def test_load_without_state(self, scheduler, document):
        scheduler.load(document)
        assert scheduler.state is PlaybackState.PAUSED
        assert scheduler.cursor == 0
        assert scheduler.wpm == 600

    def test_load_state_object(self, scheduler, document):
        scheduler.load(document, ReadingStateData(document_id="doc-1", idx=2, wpm=300))
        assert scheduler.cursor == 2
        assert scheduler.wpm == 300

    @pytest.mark.parametrize(
        "state,expected_idx,expected_wpm",
        [
            ({"idx": 1, "wpm": 450}, 1, 450),
            ({"idx": 99, "wpm": 600}, 3, 600),
            ({"idx": -5, "wpm": 600}, 0, 600),
            ({"idx": 2.0, "wpm": 300.0}, 2, 300),
            ({"idx": "2", "wpm": "fast"}, 0, 600),
            ({"idx": None, "wpm": None}, 0, 600),
            ({"idx": True, "wpm": 0}, 0, 600),
            ({"wpm": 5000}, 0, 1200),
            ({"wpm": 50}, 0, 200),
            ({}, 0, 600),
        ],
    )
    def test_load_mapping_falls_back_per_field(
        self, scheduler, document, state, expected_idx, expected_wpm
    ):
        scheduler.load(document, state)
        assert scheduler.cursor == expected_idx
        assert scheduler.wpm == expected_wpm

    def test_load_emits_frame_but_no_change(self, scheduler, document, events, frames):
        scheduler.load(document, {"idx": 1, "wpm": 600})
        assert events == []
        assert len(frames) == 1
        assert frames[0].token == "beta"
        assert frames[0].position == 1
        assert frames[0].total == 4

    def test_load_keeps_extensions_copy(self, scheduler, document):
        extensions = {"theme": "dark"}
        scheduler.load(document, {"idx": 0, "wpm": 600, "extensions": extensions})
        extensions["theme"] = "light"
        assert scheduler.snapshot().extensions == {"theme": "dark"}


# =============================================================================
# Ticking
# =============================================================================


class TestTick:

    def test_first_tick_only_records_timestamp(self, scheduler, document):
        scheduler.load(document)
        scheduler.play()
        assert scheduler.tick(5000.0) is False
        assert scheduler.cursor == 0

    def test_advances_after_dwell(self, scheduler, document):
        start_playing(scheduler, document)
        assert scheduler.tick(50.0) is False
        assert scheduler.tick(100.0) is True
        assert scheduler.cursor == 1
        assert scheduler.accumulated_ms == 0.0

    def test_excess_time_is_carried(self, scheduler, document):
        start_playing(scheduler, document)
        assert scheduler.tick(150.0) is True
        assert scheduler.accumulated_ms == 50.0
        assert scheduler.tick(200.0) is True
        assert scheduler.cursor == 2

    def test_at_most_one_token_per_tick(self, scheduler, document):
        start_playing(scheduler, document)
        assert scheduler.tick(10_000.0) is True
        assert scheduler.cursor == 1

    def test_clock_going_backwards_counts_as_zero(self, scheduler, document):
        start_playing(scheduler, document, now_ms=1000.0)
        scheduler.tick(1050.0)
        assert scheduler.tick(900.0) is False
        assert scheduler.accumulated_ms == 50.0

    def test_pauses_at_last_token(self, scheduler, document):
        start_playing(scheduler, document)
        now = 0.0
        for _ in range(3):
            now += 100.0
            assert scheduler.tick(now) is True
        assert scheduler.cursor == 3
        assert scheduler.is_playing

        assert scheduler.tick(now + 100.0) is False
        assert scheduler.state is PlaybackState.PAUSED
        assert scheduler.cursor == 3
        assert scheduler.accumulated_ms == 0.0

    def test_sentence_end_dwells_longer(self, scheduler):
        document = build_document("Stop. Go", document_id="doc-2")
        start_playing(scheduler, document)
        assert scheduler.tick(300.0) is False
        assert scheduler.tick(320.0) is True

    def test_tick_while_paused_does_nothing(self, scheduler, document):
        scheduler.load(document)
        assert scheduler.tick(0.0) is False
        assert scheduler.tick(1000.0) is False
        assert scheduler.cursor == 0

    def test_emits_change_and_frame_per_advance(self, scheduler, document, events, frames):
        start_playing(scheduler, document)
        scheduler.tick(100.0)
        assert events == [ReadingStateChanged(document_id="doc-1", idx=1, wpm=600)]
        assert frames[-1].token == "beta"


# =============================================================================
# Play / pause
# =============================================================================


class TestPlayPause:

    def test_pause_preserves_cursor(self, scheduler, document):
        start_playing(scheduler, document)
        scheduler.tick(100.0)
        scheduler.pause()
        assert scheduler.state is PlaybackState.PAUSED
        assert scheduler.cursor == 1

    def test_resume_resets_timing(self, scheduler, document):
        start_playing(scheduler, document)
        scheduler.tick(90.0)
        scheduler.pause()
        scheduler.play()
        assert scheduler.accumulated_ms == 0.0
        # First tick after resuming only records the timestamp
        assert scheduler.tick(10_000.0) is False
        assert scheduler.cursor == 0

    def test_toggle(self, scheduler, document):
        scheduler.load(document)
        scheduler.toggle()
        assert scheduler.is_playing
        scheduler.toggle()
        assert scheduler.state is PlaybackState.PAUSED

    def test_play_twice_keeps_accumulator(self, scheduler, document):
        start_playing(scheduler, document)
        scheduler.tick(60.0)
        scheduler.play()
        assert scheduler.accumulated_ms == 60.0

    def test_play_empty_document_is_ignored(self, scheduler):
        empty = DocumentData(id="empty", title="Empty", tokens=(), orp_indexes=())
        scheduler.load(empty)
        scheduler.play()
        assert scheduler.state is PlaybackState.PAUSED
        assert scheduler.current_token == ""


# =============================================================================
# Seeking
# =============================================================================


class TestSeek:

    def test_seek_forward_and_back(self, scheduler, document, events):
        scheduler.load(document)
        scheduler.seek(2)
        assert scheduler.cursor == 2
        scheduler.seek(-1)
        assert scheduler.cursor == 1
        assert [event.idx for event in events] == [2, 1]

    def test_seek_clamps_at_start(self, scheduler, document):
        scheduler.load(document, {"idx": 1})
        scheduler.seek(-10)
        assert scheduler.cursor == 0

    def test_seek_resets_accumulator(self, scheduler, document):
        start_playing(scheduler, document)
        scheduler.tick(80.0)
        scheduler.seek(1)
        assert scheduler.accumulated_ms == 0.0
        assert scheduler.is_playing

    def test_seek_past_end_while_playing_pauses(self, scheduler, document):
        start_playing(scheduler, document)
        scheduler.seek(10)
        assert scheduler.cursor == 3
        assert scheduler.state is PlaybackState.PAUSED

    def test_seek_to_same_position_emits_nothing(self, scheduler, document, events):
        scheduler.load(document)
        scheduler.seek(-1)
        assert events == []

    @pytest.mark.parametrize("index,expected", [(2, 2), (99, 3), (-4, 0)])
    def test_jump_to(self, scheduler, document, index, expected):
        scheduler.load(document, {"idx": 1})
        scheduler.jump_to(index)
        assert scheduler.cursor == expected


# =============================================================================
# Speed
# =============================================================================


class TestSetSpeed:

    def test_set_speed_emits_change(self, scheduler, document, events):
        scheduler.load(document)
        scheduler.set_speed(300)
        assert scheduler.wpm == 300
        assert events == [ReadingStateChanged(document_id="doc-1", idx=0, wpm=300)]

    @pytest.mark.parametrize("value,expected", [(5000, 1200), (10, 200), (450.0, 450)])
    def test_set_speed_is_bounded(self, scheduler, document, value, expected):
        scheduler.load(document)
        scheduler.set_speed(value)
        assert scheduler.wpm == expected

    @pytest.mark.parametrize("value", [0, -300, "fast", None, 450.5, True])
    def test_invalid_speed_is_ignored(self, scheduler, document, events, value):
        scheduler.load(document)
        scheduler.set_speed(value)
        assert scheduler.wpm == 600
        assert events == []

    def test_same_speed_emits_nothing(self, scheduler, document, events):
        scheduler.load(document)
        scheduler.set_speed(600)
        assert events == []

    def test_accumulator_survives_speed_change(self, scheduler, document):
        start_playing(scheduler, document)
        scheduler.tick(60.0)
        scheduler.set_speed(1200)
        assert scheduler.accumulated_ms == 60.0
        # 60 ms already exceeds the 50 ms dwell at the new speed
        assert scheduler.tick(60.0) is True


# =============================================================================
# Listeners and snapshots
# =============================================================================


class TestListeners:

    def test_failing_listener_does_not_break_playback(self, scheduler, document, events):
        def broken(event):
            raise RuntimeError("boom")

        scheduler.add_change_listener(broken)
        scheduler.load(document)
        scheduler.seek(1)
        assert scheduler.cursor == 1
        assert len(events) == 1

    def test_remove_listener(self, scheduler, document, events):
        scheduler.remove_change_listener(events.append)
        scheduler.load(document)
        scheduler.seek(1)
        assert events == []

    def test_snapshot_is_a_copy(self, scheduler, document):
        scheduler.load(document, {"idx": 2, "wpm": 300})
        snapshot = scheduler.snapshot()
        snapshot.idx = 0
        assert snapshot.document_id == "doc-1"
        assert scheduler.cursor == 2

    def test_frame_parts(self, scheduler, document):
        scheduler.load(document)
        frame = scheduler.frame()
        assert frame.orp_index == 1
        assert frame.parts == ("a", "l", "pha")

    def test_current_dwell(self, scheduler, document):
        scheduler.load(document, {"wpm": 300})
        assert scheduler.current_dwell_ms() == 200.0
