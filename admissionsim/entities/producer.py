from admissionsim.entities.dispatcher import Dispatcher
from admissionsim.math.stochastic_process import StochasticProcess


class Producer:
    """Emits requests into the dispatcher's pending queue.

    Emission instants follow the producer's process. A request is stamped
    with its scheduled emission time rather than the tick that noticed it,
    and a tick coarser than several inter-arrival gaps emits all of them,
    so throughput does not depend on the clock quantum.
    """

    def __init__(self, process: StochasticProcess, dispatcher: Dispatcher):
        self._process = process
        self._dispatcher = dispatcher
        self._next_emission = 0.0
        self._generated = 0

    @property
    def generated(self) -> int:
        return self._generated

    @property
    def next_emission(self) -> float:
        return self._next_emission

    def tick(self, now: float) -> None:
        while now >= self._next_emission:
            self._dispatcher.queue(self._next_emission)
            self._next_emission += self._process.get()
            self._generated += 1
