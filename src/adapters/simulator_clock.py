from datetime import timedelta


class ManualClock:
    """
    Clock fake for testing: time only moves when the test says so.

    Pass the instance wherever a Clock (callable returning epoch ms) is expected.
    """

    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += int(delta.total_seconds() * 1000)
