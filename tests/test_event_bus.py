"""Tests for listener categories and dispatch order of EventBus."""

from __future__ import annotations

from typing import Any
import unittest

from freedom_util.events import Dispatch, EventBus


class Recorder:
    """Collect handler invocations in call order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def handler(self, label: str, result: Any = None):
        def _handle(data: Any) -> Any:
            self.calls.append((label, data))
            return result

        return _handle


class EventBusTests(unittest.TestCase):
    """Validate on/once/emit semantics."""

    def setUp(self) -> None:
        self.bus = EventBus(name="test")
        self.recorder = Recorder()

    def test_emit_without_listeners_is_noop(self) -> None:
        self.assertEqual(self.bus.emit("nothing", {"x": 1}), Dispatch.CONTINUE)
        self.assertEqual(self.recorder.calls, [])

    def test_type_listeners_run_in_registration_order(self) -> None:
        for label in ("a", "b", "c"):
            self.bus.on("ready", self.recorder.handler(label))
        self.bus.emit("ready", 7)
        self.assertEqual(self.recorder.calls, [("a", 7), ("b", 7), ("c", 7)])

    def test_type_listener_only_receives_its_type(self) -> None:
        self.bus.on("ready", self.recorder.handler("ready"))
        self.bus.emit("other", 1)
        self.assertEqual(self.recorder.calls, [])

    def test_stop_signal_short_circuits_every_category(self) -> None:
        self.bus.on("ready", self.recorder.handler("first"))
        self.bus.on("ready", self.recorder.handler("stopper", Dispatch.STOP))
        self.bus.on("ready", self.recorder.handler("after"))
        self.bus.once("ready", self.recorder.handler("oneshot"))
        self.bus.on(lambda t, d: True, self.recorder.handler("conditional"))
        self.bus.once(lambda t, d: True, self.recorder.handler("once_conditional"))

        result = self.bus.emit("ready", "x")

        self.assertEqual(result, Dispatch.STOP)
        self.assertEqual(self.recorder.calls, [("first", "x"), ("stopper", "x")])

    def test_returning_false_stops_dispatch(self) -> None:
        self.bus.on("ready", self.recorder.handler("stopper", False))
        self.bus.once("ready", self.recorder.handler("oneshot"))
        self.assertEqual(self.bus.emit("ready"), Dispatch.STOP)
        self.assertEqual(self.recorder.calls, [("stopper", None)])

    def test_falsy_non_false_results_do_not_stop(self) -> None:
        for label, result in (("none", None), ("zero", 0), ("empty", "")):
            self.bus.on("ready", self.recorder.handler(label, result))
        self.bus.once("ready", self.recorder.handler("oneshot"))
        self.assertEqual(self.bus.emit("ready"), Dispatch.CONTINUE)
        self.assertEqual(
            [label for label, _ in self.recorder.calls],
            ["none", "zero", "empty", "oneshot"],
        )

    def test_oneshot_fires_only_once(self) -> None:
        self.bus.once("ready", self.recorder.handler("oneshot"))
        self.bus.emit("ready", 1)
        self.bus.emit("ready", 2)
        self.assertEqual(self.recorder.calls, [("oneshot", 1)])

    def test_stopped_dispatch_keeps_oneshot_pending(self) -> None:
        stop = {"value": True}
        self.bus.on("ready", lambda data: Dispatch.STOP if stop["value"] else None)
        self.bus.once("ready", self.recorder.handler("oneshot"))
        self.bus.emit("ready", 1)
        stop["value"] = False
        self.bus.emit("ready", 2)
        self.assertEqual(self.recorder.calls, [("oneshot", 2)])

    def test_raising_oneshot_stays_registered(self) -> None:
        attempts = {"count": 0}

        def flaky(data: Any) -> None:
            attempts["count"] += 1
            if attempts["count"] == 1:
                raise RuntimeError("boom")
            self.recorder.calls.append(("flaky", data))

        self.bus.once("ready", flaky)
        self.bus.once("ready", self.recorder.handler("later"))

        with self.assertRaises(RuntimeError):
            self.bus.emit("ready", 1)
        self.assertEqual(self.recorder.calls, [])

        self.bus.emit("ready", 2)
        self.assertEqual(self.recorder.calls, [("flaky", 2), ("later", 2)])

        self.bus.emit("ready", 3)
        self.assertEqual(attempts["count"], 2)

    def test_type_listener_exception_propagates(self) -> None:
        def broken(data: Any) -> None:
            raise ValueError("bad handler")

        self.bus.on("ready", broken)
        with self.assertRaises(ValueError):
            self.bus.emit("ready")

    def test_conditional_fires_on_every_match(self) -> None:
        self.bus.on(lambda t, d: t == "x", self.recorder.handler("cond"))
        for index in range(5):
            self.bus.emit("x", index)
            self.bus.emit("y", index)
        self.assertEqual(
            self.recorder.calls, [("cond", index) for index in range(5)]
        )

    def test_conditional_predicate_receives_type_and_data(self) -> None:
        seen: list[tuple[str, Any]] = []

        def predicate(event_type: str, data: Any) -> bool:
            seen.append((event_type, data))
            return data == "match"

        self.bus.on(predicate, self.recorder.handler("cond"))
        self.bus.emit("a", "miss")
        self.bus.emit("b", "match")
        self.assertEqual(seen, [("a", "miss"), ("b", "match")])
        self.assertEqual(self.recorder.calls, [("cond", "match")])

    def test_once_conditional_fires_at_most_once(self) -> None:
        self.bus.once(lambda t, d: t == "x", self.recorder.handler("once"))
        self.bus.emit("y", 0)
        self.bus.emit("x", 1)
        self.bus.emit("x", 2)
        self.assertEqual(self.recorder.calls, [("once", 1)])

    def test_once_conditionals_scan_in_reverse(self) -> None:
        self.bus.once(lambda t, d: True, self.recorder.handler("first"))
        self.bus.once(lambda t, d: False, self.recorder.handler("never"))
        self.bus.once(lambda t, d: True, self.recorder.handler("third"))
        self.bus.emit("x", 1)
        self.bus.emit("x", 2)
        self.assertEqual(self.recorder.calls, [("third", 1), ("first", 1)])

    def test_category_order(self) -> None:
        self.bus.once(lambda t, d: True, self.recorder.handler("once_conditional"))
        self.bus.on(lambda t, d: True, self.recorder.handler("conditional"))
        self.bus.once("ready", self.recorder.handler("oneshot"))
        self.bus.on("ready", self.recorder.handler("listener"))
        self.bus.emit("ready", None)
        self.assertEqual(
            [label for label, _ in self.recorder.calls],
            ["listener", "oneshot", "conditional", "once_conditional"],
        )

    def test_listener_added_by_type_listener_runs_in_same_pass(self) -> None:
        def registering(data: Any) -> None:
            self.recorder.calls.append(("registering", data))
            self.bus.on("ready", self.recorder.handler("late"))

        self.bus.on("ready", registering)
        self.bus.emit("ready", 1)
        self.assertEqual(self.recorder.calls, [("registering", 1), ("late", 1)])

    def test_listener_added_by_oneshot_waits_for_next_emit(self) -> None:
        def registering(data: Any) -> None:
            self.recorder.calls.append(("registering", data))
            self.bus.on("ready", self.recorder.handler("late"))

        self.bus.once("ready", registering)
        self.bus.on("ready", lambda data: None)
        self.bus.emit("ready", 1)
        self.assertEqual(self.recorder.calls, [("registering", 1)])
        self.bus.emit("ready", 2)
        self.assertEqual(self.recorder.calls[-1], ("late", 2))

    def test_oneshot_added_during_oneshot_pass_is_consumed(self) -> None:
        def chaining(data: Any) -> None:
            self.recorder.calls.append(("chaining", data))
            self.bus.once("ready", self.recorder.handler("chained"))

        self.bus.once("ready", chaining)
        self.bus.emit("ready", 1)
        self.bus.emit("ready", 2)
        self.assertEqual(self.recorder.calls, [("chaining", 1), ("chained", 1)])

    def test_reentrant_emit_from_once_conditional_does_not_crash(self) -> None:
        def reentrant(data: Any) -> None:
            self.recorder.calls.append(("reentrant", data))
            self.bus.emit("inner", data)

        self.bus.once(lambda t, d: True, self.recorder.handler("bottom"))
        self.bus.once(lambda t, d: True, self.recorder.handler("middle"))
        self.bus.once(lambda t, d: t == "outer", reentrant)

        self.bus.emit("outer", 1)

        self.assertEqual(
            self.recorder.calls,
            [("reentrant", 1), ("middle", 1), ("bottom", 1)],
        )
        self.bus.emit("outer", 2)
        self.assertEqual(len(self.recorder.calls), 3)

    def test_registration_is_logged(self) -> None:
        with self.assertLogs("freedom_util.events.bus", level="DEBUG") as logs:
            self.bus.on("ready", self.recorder.handler("a"))
            self.bus.on("ready", self.recorder.handler("stop", Dispatch.STOP))
            self.bus.emit("ready")
        self.assertTrue(any("events.registered" in line for line in logs.output))
        self.assertTrue(any("events.dispatch.stopped" in line for line in logs.output))


class CompositionTests(unittest.TestCase):
    """Owners expose events by holding a bus."""

    def test_owner_holds_independent_bus(self) -> None:
        class Module:
            def __init__(self) -> None:
                self.events = EventBus(name="module")

        first, second = Module(), Module()
        received: list[Any] = []
        first.events.on("ready", received.append)
        second.events.emit("ready", "second")
        first.events.emit("ready", "first")
        self.assertEqual(received, ["first"])


if __name__ == "__main__":
    unittest.main()
