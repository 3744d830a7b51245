from datetime import timedelta

from linkshort.sliding_window import SlidingWindowGlobalLimiter, SlidingWindowKeyedLimiter


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now

    def set(self, value):
        self.now = value


def test_global_allows_up_to_limit():
    clock = FakeClock()
    limiter = SlidingWindowGlobalLimiter(3, 10, clock=clock)
    results = [limiter.allow() for _ in range(4)]
    assert all(results[:3])
    assert not results[3]


def test_global_window_slides():
    clock = FakeClock(100.0)
    limiter = SlidingWindowGlobalLimiter(2, 10, clock=clock)
    assert limiter.allow()
    clock.set(105.0)
    assert limiter.allow()
    clock.set(107.0)
    assert not limiter.allow()
    clock.set(110.5)
    assert limiter.allow()
    clock.set(111.0)
    assert not limiter.allow()


def test_global_request_exactly_window_old_is_dropped():
    clock = FakeClock(100.0)
    limiter = SlidingWindowGlobalLimiter(1, timedelta(seconds=10), clock=clock)
    assert limiter.allow()
    clock.set(110.0)
    assert limiter.allow()


def test_keyed_limits_each_key():
    clock = FakeClock()
    limiter = SlidingWindowKeyedLimiter(1, 10, clock=clock)
    assert limiter.allow("a")
    assert not limiter.allow("a")
    assert limiter.allow("b")


def test_keyed_window_slides():
    clock = FakeClock(0.0)
    limiter = SlidingWindowKeyedLimiter(2, 10, clock=clock)
    assert limiter.allow("a")
    clock.set(6.0)
    assert limiter.allow("a")
    assert not limiter.allow("a")
    clock.set(10.5)
    assert limiter.allow("a")
    assert not limiter.allow("a")