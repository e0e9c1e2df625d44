import math
import time


class Timer:
    """
    Wall-clock budget for a search. `check()` raises a TimeoutError once the
    budget is used up, so it can be called at every step of a long computation.
    """

    def __init__(self, time_limit: float = math.inf) -> None:
        self.time_limit = time_limit
        self.start = time.perf_counter()

    def elapsed(self) -> float:
        return time.perf_counter() - self.start

    def remaining(self) -> float:
        return self.time_limit - self.elapsed()

    def is_out_of_time(self) -> bool:
        return self.remaining() <= 0

    def check(self) -> None:
        if self.is_out_of_time():
            msg = f"Time limit of {self.time_limit}s reached."
            raise TimeoutError(msg)
