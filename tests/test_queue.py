from cdcase.player.queue import PlaybackQueue, QueueState


def _queue(output):
    q = PlaybackQueue(output)
    events = []
    q.stateChanged.connect(events.append)
    return q, events


def test_new_queue_is_empty(output):
    q, _ = _queue(output)

    assert q.state == QueueState.EMPTY
    assert q.current_track is None
    assert q.index is None
    assert not q.has_queue
    assert not q.is_playing


def test_start_loads_first_track_and_plays(output, make_track):
    t1, t2 = make_track("1"), make_track("2")
    q, events = _queue(output)

    q.start([t1, t2])

    assert q.current_track == t1
    assert q.index == 0
    assert q.state == QueueState.PLAYING
    assert output.calls == [("load", t1.file_path, True)]
    assert len(events) == 1
    assert events[0].current_track == t1
    assert events[0].is_playing


def test_start_takes_a_snapshot(output, make_track):
    tracks = [make_track("1"), make_track("2")]
    q, _ = _queue(output)

    q.start(tracks)
    tracks.append(make_track("3"))

    assert len(q.tracks) == 2


def test_start_with_no_tracks_leaves_queue_empty(output, make_track):
    q, _ = _queue(output)
    q.start([make_track("1")])

    q.start([])

    assert q.state == QueueState.EMPTY
    assert q.current_track is None
    assert output.calls[-1] == ("stop",)


def test_play_and_pause_toggle_without_moving(output, make_track):
    t1, t2 = make_track("1"), make_track("2")
    q, events = _queue(output)
    q.start([t1, t2])

    q.pause()
    assert q.state == QueueState.PAUSED
    assert q.current_track == t1

    q.play()
    assert q.state == QueueState.PLAYING
    assert q.current_track == t1
    assert output.calls[1:] == [("pause",), ("play",)]
    assert len(events) == 3


def test_play_pause_on_empty_queue_are_noops(output):
    q, events = _queue(output)

    q.play()
    q.pause()
    q.toggle()

    assert q.state == QueueState.EMPTY
    assert output.calls == []
    assert events == []


def test_advance_walks_to_the_end_and_stops_there(output, make_track):
    t1, t2, t3 = make_track("1"), make_track("2"), make_track("3")
    q, events = _queue(output)
    q.start([t1, t2, t3])

    q.advance()
    q.advance()
    assert q.current_track == t3

    q.advance()
    assert q.current_track == t3
    assert q.index == 2
    # start + two real moves; the last advance changed nothing
    assert len(events) == 3


def test_advance_keeps_paused_state(output, make_track):
    t1, t2 = make_track("1"), make_track("2")
    q, _ = _queue(output)
    q.start([t1, t2])
    q.pause()

    q.advance()

    assert q.current_track == t2
    assert q.state == QueueState.PAUSED
    assert output.calls[-1] == ("load", t2.file_path, False)


def test_retreat_at_first_track_only_rewinds(output, make_track):
    t1, t2 = make_track("1"), make_track("2")
    q, events = _queue(output)
    q.start([t1, t2])

    q.retreat()

    assert q.current_track == t1
    assert q.index == 0
    assert output.calls[-1] == ("seek", 0)
    assert [c for c in output.calls if c[0] == "load"] == [("load", t1.file_path, True)]
    assert len(events) == 2


def test_retreat_moves_back_and_resumes(output, make_track):
    t1, t2 = make_track("1"), make_track("2")
    q, _ = _queue(output)
    q.start([t1, t2])
    q.advance()
    q.pause()

    q.retreat()

    assert q.current_track == t1
    assert q.state == QueueState.PLAYING
    assert output.calls[-1] == ("load", t1.file_path, True)


def test_retreat_on_empty_queue_is_noop(output):
    q, events = _queue(output)

    q.retreat()

    assert output.calls == []
    assert events == []


def test_track_finished_moves_to_next(output, make_track):
    t1, t2 = make_track("1"), make_track("2")
    q, _ = _queue(output)
    q.start([t1, t2])

    q.handle_track_finished(t1.file_path)

    assert q.current_track == t2
    assert q.state == QueueState.PLAYING
    assert output.calls[-1] == ("load", t2.file_path, True)


def test_track_finished_on_last_track_stops_without_wrapping(output, make_track):
    t1, t2 = make_track("1"), make_track("2")
    q, events = _queue(output)
    q.start([t1, t2])
    q.advance()

    q.handle_track_finished(t2.file_path)

    assert q.current_track == t2
    assert q.index == 1
    assert q.state == QueueState.PAUSED
    assert not events[-1].is_playing


def test_stale_track_finished_is_ignored(output, make_track):
    t1, t2, t3 = make_track("1"), make_track("2"), make_track("3")
    q, _ = _queue(output)
    q.start([t1, t2, t3])
    q.advance()

    # a late report for the track we already left
    q.handle_track_finished(t1.file_path)

    assert q.current_track == t2


def test_track_finished_without_path_acts_like_advance(output, make_track):
    t1, t2 = make_track("1"), make_track("2")
    q, _ = _queue(output)
    q.start([t1, t2])

    q.handle_track_finished()

    assert q.current_track == t2


def test_track_finished_on_empty_queue_is_noop(output):
    q, events = _queue(output)

    q.handle_track_finished("/nowhere.mp3")

    assert q.state == QueueState.EMPTY
    assert events == []


def test_report_during_operation_runs_once_after_it(output, make_track):
    t1, t2, t3 = make_track("1"), make_track("2"), make_track("3")
    q, events = _queue(output)
    q.start([t1, t2, t3])

    fired = []

    def finish_immediately(path):
        # output reports end-of-track from inside load()
        if not fired:
            fired.append(path)
            q.handle_track_finished(path)
            # nothing ran yet: the report is queued behind advance()
            assert q.current_track == t2

    output.on_load = finish_immediately
    q.advance()

    assert fired == [t2.file_path]
    assert q.current_track == t3
    assert [e.index for e in events] == [0, 1, 2]


def test_toggle_queued_behind_pause_sees_the_new_state(output, make_track):
    q, events = _queue(output)

    def pause_then_toggle(snapshot):
        if len(events) == 1:
            q.pause()
            q.toggle()

    q.stateChanged.connect(pause_then_toggle)
    q.start([make_track("1")])

    # toggle runs after pause() has finished, so it resumes
    assert q.state == QueueState.PLAYING
    assert output.calls[-2:] == [("pause",), ("play",)]
    assert [e.is_playing for e in events] == [True, False, True]


def test_ended_signal_is_connected(make_track):
    from PySide6.QtCore import QObject, Signal

    class SignalOutput(QObject):
        ended = Signal(str)

        def load(self, path, start_playing=True):
            pass

        def play(self):
            pass

        def pause(self):
            pass

        def stop(self):
            pass

        def seek_ms(self, ms):
            pass

    out = SignalOutput()
    t1, t2 = make_track("1"), make_track("2")
    q = PlaybackQueue(out)
    q.start([t1, t2])

    out.ended.emit(t1.file_path)

    assert q.current_track == t2


def test_queue_without_output_still_tracks_state(make_track):
    t1, t2 = make_track("1"), make_track("2")
    q = PlaybackQueue()

    q.start([t1, t2])
    q.advance()
    q.retreat()
    q.retreat()

    assert q.current_track == t1
    assert q.is_playing
