import threading

from kabu66.scheduler import ManualScheduler, TimerScheduler


def test_manual_scheduler_runs_in_order_and_skips_cancelled():
    scheduler = ManualScheduler()
    ran = []
    scheduler.call_later(0.5, lambda: ran.append("a"))
    cancelled = scheduler.call_later(0.5, lambda: ran.append("b"))
    scheduler.call_later(0.5, lambda: ran.append("c"))
    cancelled.cancel()
    assert cancelled.cancelled
    assert scheduler.pending == 2
    assert scheduler.run_pending() == 2
    assert ran == ["a", "c"]
    assert not scheduler.run_next()


def test_manual_scheduler_runs_chained_calls():
    scheduler = ManualScheduler()
    ran = []

    def first():
        ran.append(1)
        scheduler.call_later(0, lambda: ran.append(2))

    scheduler.call_later(0, first)
    assert scheduler.run_pending(limit=1) == 1
    assert scheduler.pending == 1
    scheduler.run_pending()
    assert ran == [1, 2]


def test_timer_scheduler_fires_and_cancels():
    fired = threading.Event()
    TimerScheduler().call_later(0.01, fired.set)
    assert fired.wait(2)

    never = threading.Event()
    call = TimerScheduler().call_later(5, never.set)
    call.cancel()
    assert call.cancelled
    assert not never.is_set()
