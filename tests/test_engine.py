"""Tests for the scheduling engine."""

import pytest

from steep.scheduling.engine import Engine
from steep.scheduling.host import TickScheduler
from steep.scheduling.types import HandleAction, PlainAction, TaskDescriptor
from steep.scheduling.waits import WaitTicks, WaitUntil


def one_shot(calls: list, label: str, delay: float = 0.0) -> TaskDescriptor:
    return TaskDescriptor.one_shot(lambda: calls.append(label), delay_time=delay)


class TestFifo:
    def test_tasks_run_once_in_append_order(self, engine, owner, calls):
        for i in range(5):
            assert engine.append(owner, "q", one_shot(calls, str(i), delay=0.1))

        for _ in range(10):
            engine.tick(0.1)

        assert calls == ["0", "1", "2", "3", "4"]
        assert engine.pending(owner, "q") == ()
        assert engine.is_running(owner, "q") is False

    def test_next_task_waits_for_previous(self, engine, owner, calls):
        engine.append(owner, "q", one_shot(calls, "slow", delay=1.0))
        engine.append(owner, "q", one_shot(calls, "fast"))

        engine.tick(0.5)
        assert calls == []
        engine.tick(0.5)
        assert calls == ["slow", "fast"]

    def test_loop_blocks_queue_until_done(self, engine, owner, calls):
        def loop(handle):
            calls.append("loop")
            if len(calls) == 2:
                handle.deactivate()

        engine.append(owner, "q", TaskDescriptor.unbounded_loop(loop))
        engine.append(owner, "q", one_shot(calls, "after"))

        for _ in range(4):
            engine.tick(0.1)

        assert calls == ["loop", "loop", "after"]

    def test_zero_delay_runs_inside_append(self, engine, owner, calls):
        engine.append(owner, "q", one_shot(calls, "now"))
        assert calls == ["now"]
        assert engine.pending(owner, "q") == ()


class TestIsolation:
    def test_queues_progress_independently(self, engine, owner, calls):
        engine.append(owner, "a", one_shot(calls, "a1", delay=1.0))
        engine.append(owner, "a", one_shot(calls, "a2"))
        engine.append(owner, "b", one_shot(calls, "b1", delay=0.5))

        engine.tick(0.5)
        assert calls == ["b1"]
        engine.tick(0.5)
        assert calls == ["b1", "a1", "a2"]

    def test_owners_do_not_share_queues(self, engine, calls):
        engine.append("o1", "q", one_shot(calls, "o1", delay=1.0))
        engine.append("o2", "q", one_shot(calls, "o2", delay=0.5))

        engine.tick(0.5)
        assert calls == ["o2"]
        assert engine.is_running("o1", "q") is True

    def test_stalled_queue_does_not_block_others(self, engine, owner, calls):
        engine.append(
            owner,
            "stuck",
            TaskDescriptor.one_shot(
                lambda: calls.append("never"), delay_condition=WaitUntil(lambda: False)
            ),
        )
        engine.append(owner, "stuck", one_shot(calls, "behind"))
        engine.append(owner, "free", one_shot(calls, "free", delay=0.1))

        for _ in range(5):
            engine.tick(0.1)

        assert calls == ["free"]
        assert len(engine.pending(owner, "stuck")) == 2


class TestLocking:
    def test_lock_on_empty_queue_rejected(self, engine, owner):
        assert engine.request_lock(owner, "q") is False
        assert engine.is_locked(owner, "q") is False

    def test_lock_rejects_appends_until_drained(self, engine, owner, calls):
        engine.append(owner, "q", one_shot(calls, "first", delay=0.2))
        assert engine.request_lock(owner, "q") is True

        engine.append(owner, "other", one_shot(calls, "other", delay=5))
        assert engine.last_queue_name(owner) == "other"

        assert engine.append(owner, "q", one_shot(calls, "dropped")) is False
        assert engine.last_queue_name(owner) == "q"
        assert len(engine.pending(owner, "q")) == 1

        engine.tick(0.1)
        engine.tick(0.1)
        assert calls == ["first"]
        assert engine.is_locked(owner, "q") is False

        assert engine.append(owner, "q", one_shot(calls, "accepted")) is True
        assert calls == ["first", "accepted"]

    def test_tasks_appended_before_lock_all_run(self, engine, owner, calls):
        engine.append(owner, "q", one_shot(calls, "1", delay=0.1))
        engine.append(owner, "q", one_shot(calls, "2", delay=0.1))
        engine.request_lock(owner, "q")

        for _ in range(3):
            engine.tick(0.1)

        assert calls == ["1", "2"]
        assert engine.is_locked(owner, "q") is False


class TestBypass:
    def test_runs_while_queue_locked(self, engine, owner, calls):
        engine.append(owner, "q", one_shot(calls, "queued", delay=10))
        engine.request_lock(owner, "q")

        engine.run_now(owner, 0.5, PlainAction(lambda: calls.append("bypass")))
        engine.tick(0.5)

        assert calls == ["bypass"]
        assert engine.is_locked(owner, "q") is True

    def test_bypass_tasks_run_in_parallel(self, engine, owner, calls):
        engine.run_now(owner, 1.0, PlainAction(lambda: calls.append("slow")))
        engine.run_now(owner, 0.5, PlainAction(lambda: calls.append("fast")))

        engine.tick(0.5)
        assert calls == ["fast"]
        engine.tick(0.5)
        assert calls == ["fast", "slow"]

    def test_bypass_never_enters_a_queue(self, engine, owner, calls):
        engine.run_now(owner, 1.0, PlainAction(lambda: calls.append("x")))
        assert engine.queue_names(owner) == []
        assert engine.owners() == []

    def test_bypass_with_condition(self, engine, owner, calls):
        engine.run_now(owner, WaitTicks(2), PlainAction(lambda: calls.append("x")))
        engine.tick(0.0)
        assert calls == []
        engine.tick(0.0)
        assert calls == ["x"]

    def test_bypass_with_handle(self, engine, owner):
        seen = []
        engine.run_now(owner, None, HandleAction(seen.append))
        assert len(seen) == 1

    def test_negative_delay_rejected(self, engine, owner):
        with pytest.raises(ValueError):
            engine.run_now(owner, -1.0, PlainAction(lambda: None))


class TestEndToEnd:
    def test_delayed_then_immediate(self, owner, calls):
        engine = Engine(TickScheduler())
        engine.append(owner, "Q", one_shot(calls, "A", delay=1.0))
        engine.append(owner, "Q", one_shot(calls, "B"))

        engine.tick(0.5)
        assert calls == []

        engine.tick(0.5)
        assert calls == ["A", "B"]
        assert engine.pending(owner, "Q") == ()
        assert engine.is_running(owner, "Q") is False

    def test_bounded_loop_in_queue(self, engine, owner):
        elapsed = []
        engine.append(
            owner, "q", TaskDescriptor.bounded_loop(0.25, lambda h: elapsed.append(h.elapsed))
        )
        for _ in range(6):
            engine.tick(0.1)
        assert len(elapsed) == 3

    def test_zero_duration_bounded_loop_is_skipped(self, engine, owner, calls):
        engine.append(owner, "q", TaskDescriptor.bounded_loop(0, lambda h: calls.append("loop")))
        engine.append(owner, "q", one_shot(calls, "after"))
        assert calls == ["after"]


class TestOwnerTeardown:
    def test_forget_owner_releases_state(self, engine, owner, calls):
        engine.append(owner, "q", one_shot(calls, "x", delay=1))
        engine.request_lock(owner, "q")
        engine.forget_owner(owner)

        assert engine.owners() == []
        assert engine.is_locked(owner, "q") is False
        assert engine.append(owner, "q", one_shot(calls, "fresh")) is True
        assert calls == ["fresh"]

    def test_forget_owner_recovers_after_failure(self, engine, owner, calls):
        def boom():
            raise RuntimeError("boom")

        engine.append(owner, "q", TaskDescriptor.one_shot(boom))
        assert engine.is_running(owner, "q") is True

        engine.append(owner, "q", one_shot(calls, "stuck"))
        engine.tick(0.1)
        assert calls == []

        engine.forget_owner(owner)
        engine.append(owner, "q", one_shot(calls, "ok"))
        assert calls == ["ok"]


class TestDefaultQueueName:
    def test_custom_default(self, owner):
        engine = Engine(default_queue_name="main")
        assert engine.last_queue_name(owner) == "main"
