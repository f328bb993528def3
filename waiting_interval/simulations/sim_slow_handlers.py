from waiting_interval import scheduler
from waiting_interval.manager import IntervalManager

import random


class SimSlowHandlers:
    """
    Start several cycles whose handlers take a random amount of (simulated) time,
    often longer than the delay before the next firing. Every invocation records
    its (start, end) span so the non-overlap of each cycle can be checked.
    """

    def __init__(
        self,
        num_cycles=3,
        delays=(10, 20, 40),
        min_work_ms=0,
        max_work_ms=50,
        fail_prob=0,
        stop_on_error=False,
        random_seed=None,
    ):
        self.params = {
            "num_cycles": num_cycles,
            "delays": tuple(delays),
            "min_work_ms": min_work_ms,
            "max_work_ms": max_work_ms,
            "fail_prob": fail_prob,
            "stop_on_error": stop_on_error,
            "random_seed": random_seed if random_seed else random.randint(0, 2**32),
        }
        self.rng = random.Random(self.params["random_seed"])

        self.clock = scheduler.SimClock()
        self.scheduler = scheduler.SimScheduler(self.clock)
        self.errors = []
        self.manager = IntervalManager(
            self.scheduler,
            on_error=lambda cycle_id, exc: self.errors.append((cycle_id, exc)),
            stop_on_error=stop_on_error,
        )
        self.spans = {}
        self.ids = []

    def work(self, name):
        """Handler body: the clock moves forward while the handler "runs"."""
        start = self.clock.now_ms()
        self.clock.advance(
            self.rng.randint(self.params["min_work_ms"], self.params["max_work_ms"])
        )
        self.spans[name].append((start, self.clock.now_ms()))
        if self.rng.random() < self.params["fail_prob"]:
            raise RuntimeError(f"{name} failed at t={self.clock.now_ms()}")

    def run_scenario(self, duration_ms=2000):
        for i in range(self.params["num_cycles"]):
            name = f"c{i}"
            self.spans[name] = []
            self.ids.append(self.manager.start(self.work, self.params["delays"], name))
        self.scheduler.run_for(duration_ms, step_ms=1)
        return self.spans


def main():
    sim = SimSlowHandlers(num_cycles=2, max_work_ms=30, random_seed=1)
    spans = sim.run_scenario(500)
    for name, s in spans.items():
        print(name, s[:6])
    print(sim.scheduler.dump_state())


if __name__ == "__main__":
    main()
