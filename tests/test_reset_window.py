from datetime import timedelta

from linkshort.reset_window import ResettingWindowLimiter


class FakeScheduler:
    def __init__(self):
        self.calls = []

    def __call__(self, delay, callback):
        self.calls.append((delay, callback))


def test_allows_up_to_limit_then_reports_window():
    scheduler = FakeScheduler()
    limiter = ResettingWindowLimiter(2, 30, schedule=scheduler)
    assert limiter.allow("10.0.0.1") == (True, timedelta(0))
    assert limiter.allow("10.0.0.1") == (True, timedelta(0))
    assert limiter.allow("10.0.0.1") == (False, timedelta(seconds=30))


def test_schedules_one_reset_per_new_key():
    scheduler = FakeScheduler()
    limiter = ResettingWindowLimiter(5, timedelta(seconds=30), schedule=scheduler)
    for _ in range(3):
        limiter.allow("a")
    limiter.allow("b")
    assert [delay for delay, _ in scheduler.calls] == [30.0, 30.0]


def test_reset_callback_clears_count():
    scheduler = FakeScheduler()
    limiter = ResettingWindowLimiter(1, 30, schedule=scheduler)
    assert limiter.allow("a")[0]
    assert not limiter.allow("a")[0]
    _, callback = scheduler.calls[0]
    callback()
    assert limiter.allow("a")[0]
    assert len(scheduler.calls) == 2


def test_keys_are_independent():
    scheduler = FakeScheduler()
    limiter = ResettingWindowLimiter(1, 30, schedule=scheduler)
    assert limiter.allow("a")[0]
    assert not limiter.allow("a")[0]
    assert limiter.allow("b")[0]


def test_zero_limit_still_admits_first_request():
    scheduler = FakeScheduler()
    limiter = ResettingWindowLimiter(0, 30, schedule=scheduler)
    assert limiter.allow("a")[0]
    assert not limiter.allow("a")[0]


def test_synchronous_scheduler_does_not_deadlock():
    limiter = ResettingWindowLimiter(1, 30, schedule=lambda delay, cb: cb())
    assert limiter.allow("a")[0]
    assert limiter.allow("a")[0]