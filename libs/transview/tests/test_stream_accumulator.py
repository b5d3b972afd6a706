from __future__ import annotations

from transview.pipeline.accumulator import StreamAccumulator


def test_appends_only_for_tracked_request() -> None:
    acc = StreamAccumulator()
    acc.reset(2)

    assert acc.append_chunk(2, "Hello ") is True
    assert acc.append_chunk(1, "stale") is False
    assert acc.append_chunk(2, "world") is True
    assert acc.current_text() == "Hello world"


def test_reset_drops_previous_buffer() -> None:
    acc = StreamAccumulator()
    acc.reset(1)
    acc.append_chunk(1, "old")
    acc.reset(2)

    assert acc.current_text() == ""
    assert acc.append_chunk(1, "late") is False
    assert acc.current_text() == ""
    assert acc.request_id == 2


def test_complete_and_discard() -> None:
    acc = StreamAccumulator()
    acc.reset(5)
    acc.append_chunk(5, "x")

    assert acc.complete(4) is False
    assert acc.complete(5) is True
    assert acc.is_complete is True
    assert acc.append_chunk(5, "y") is False
    assert acc.current_text() == "x"

    acc.discard()
    assert acc.request_id is None
    assert acc.current_text() == ""
    assert acc.append_chunk(5, "z") is False


def test_render_partial_state() -> None:
    acc = StreamAccumulator()
    acc.reset(1)
    acc.append_chunk(1, "# Tit")
    assert [l.html for l in acc.render()] == ['<h1 data-line="0">Tit</h1>']

    acc.append_chunk(1, "le\n\n- it")
    assert [l.html for l in acc.render()] == [
        '<h1 data-line="0">Title</h1>',
        '<ul><li data-line="2">it</li></ul>',
    ]


def test_no_state_renders_nothing() -> None:
    assert StreamAccumulator().render() == []
