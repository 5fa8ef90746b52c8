import logging

import pytest

from emitter import Emitter, EmitterConfig, create


def test_emit_executes_all_listeners(emitter: Emitter, make_listener):
    callback1, callback2 = make_listener("a"), make_listener("b")

    emitter.on("resize", callback1)
    emitter.on("resize", callback2)
    emitter.emit("resize")

    assert callback1.call_count == 1
    assert callback2.call_count == 1


def test_emit_passes_data_verbatim(emitter: Emitter, make_listener):
    callback = make_listener()
    data = {"message": "hello"}

    emitter.on("message_received", callback)
    emitter.emit("message_received", data)

    assert callback.calls == [{"message": "hello"}]
    assert callback.calls[0] is data
    assert "type" not in data


def test_emit_defaults_payload_to_event_type(emitter: Emitter, make_listener):
    callback = make_listener()

    emitter.on("loading", callback)
    emitter.emit("loading")

    assert callback.calls == [{"type": "loading"}]


def test_default_payload_is_shared_across_listeners(emitter: Emitter, make_listener):
    callback1, callback2 = make_listener("a"), make_listener("b")
    emitter.on("loading", callback1)
    emitter.on("loading", callback2)

    emitter.emit("loading")

    assert callback1.calls[0] is callback2.calls[0]


@pytest.mark.parametrize("data", [None, 0, "", False, [], {}])
def test_falsy_data_is_delivered_as_is(emitter: Emitter, make_listener, data):
    callback = make_listener()
    emitter.on("value", callback)

    emitter.emit("value", data)

    assert callback.calls == [data]
    assert callback.calls[0] is data


def test_emit_without_listeners_does_nothing(emitter: Emitter):
    emitter.emit("keyup")
    emitter.emit("keyup", {"key": "a"})
    assert emitter.events == {}


def test_emit_calls_listeners_in_registration_order(emitter: Emitter):
    order = []
    for n in range(5):
        emitter.on("step", lambda payload, n=n: order.append(n))

    emitter.emit("step")

    assert order == [0, 1, 2, 3, 4]


def test_emit_only_reaches_listeners_of_that_event(emitter: Emitter, make_listener):
    click, key = make_listener("click"), make_listener("key")
    emitter.on("click", click)
    emitter.on("keyup", key)

    emitter.emit("click")

    assert click.call_count == 1
    assert key.call_count == 0


def test_listener_removed_by_earlier_listener_does_not_fire(emitter: Emitter, make_listener):
    victim = make_listener("victim")
    emitter.on("tick", lambda payload: emitter.off("tick", victim))
    emitter.on("tick", victim)

    emitter.emit("tick")

    assert victim.call_count == 0


def test_listener_added_during_emit_waits_for_next_emission(emitter: Emitter, make_listener):
    late = make_listener("late")
    emitter.on("tick", lambda payload: emitter.on("tick", late))

    emitter.emit("tick")
    assert late.call_count == 0

    emitter.emit("tick")
    assert late.call_count == 1


def test_listener_removing_itself_does_not_skip_next(emitter: Emitter, make_listener):
    after = make_listener("after")

    def remove_self(payload):
        emitter.off("tick", remove_self)

    emitter.on("tick", remove_self)
    emitter.on("tick", after)
    emitter.emit("tick")

    assert after.call_count == 1
    assert emitter.listeners("tick") == [after]


def test_nested_emit_runs_to_completion_first(emitter: Emitter):
    order = []

    def outer(payload):
        order.append("outer")
        emitter.emit("inner")
        order.append("outer-done")

    emitter.on("outer", outer)
    emitter.on("outer", lambda payload: order.append("outer-2"))
    emitter.on("inner", lambda payload: order.append("inner"))

    emitter.emit("outer")

    assert order == ["outer", "inner", "outer-done", "outer-2"]


def test_listener_error_propagates_by_default(emitter: Emitter, make_listener):
    after = make_listener("after")

    def boom(payload):
        raise RuntimeError("boom")

    emitter.on("save", boom)
    emitter.on("save", after)

    with pytest.raises(RuntimeError, match="boom"):
        emitter.emit("save")
    assert after.call_count == 0


def test_listener_error_isolated_when_configured(make_listener, caplog):
    emitter = create(EmitterConfig(listener_errors="isolate"))
    after = make_listener("after")

    def boom(payload):
        raise RuntimeError("boom")

    emitter.on("save", boom)
    emitter.on("save", after)

    with caplog.at_level(logging.ERROR, logger="emitter"):
        emitter.emit("save")

    assert after.call_count == 1
    assert "Error in listener boom for 'save'" in caplog.text


def test_emit_logs_dispatch_at_debug(emitter: Emitter, make_listener, caplog):
    emitter.on("resize", make_listener())

    with caplog.at_level(logging.DEBUG, logger="emitter"):
        emitter.emit("resize")
        emitter.emit("missing")

    assert "Emitting 'resize' to 1 listeners" in caplog.text
    assert "Emitting 'missing' with no listeners" in caplog.text


def test_listener_removed_and_readded_mid_emit_waits_for_next(emitter: Emitter, make_listener):
    victim = make_listener("victim")

    def churn(payload):
        emitter.off("tick", victim)
        emitter.on("tick", victim)

    emitter.on("tick", churn)
    emitter.on("tick", victim)

    emitter.emit("tick")
    assert victim.call_count == 0
    assert emitter.listeners("tick") == [churn, victim]

    emitter.off("tick", churn)
    emitter.emit("tick")
    assert victim.call_count == 1
