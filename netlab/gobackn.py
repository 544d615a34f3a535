"""Go-Back-N sliding-window simulation with random frame and acknowledgement loss."""

from __future__ import annotations

import argparse
import random
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Protocol


class _RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


@dataclass(frozen=True)
class Frame:
    """A frame carrying ``info`` under sequence number ``seq``."""

    info: int
    seq: int

    def shifted(self, offset: int) -> Frame:
        return Frame(self.info + offset, self.seq + offset)

    def __str__(self) -> str:
        return f"{self.info}-{self.seq}"


class GoBackNSimulation:
    """Send ``rounds`` windows of ``window`` frames; each send and ack fails half the time."""

    def __init__(
        self,
        rng: _RandomSource | None = None,
        window: int = 3,
        rounds: int = 3,
        first_info: int = 11,
        first_seq: int = 1,
    ) -> None:
        if window <= 0:
            raise ValueError("the window must hold at least one frame")
        if rounds < 0:
            raise ValueError("the number of rounds must not be negative")
        self.rng = rng if rng is not None else random.Random()
        self.window = window
        self.rounds = rounds
        self.first_info = first_info
        self.first_seq = first_seq

    def _fails(self) -> bool:
        return self.rng.randrange(2) == 0

    def _send(self, base: Frame, duplicate: bool) -> Iterator[str]:
        while True:
            failed = self._fails()
            if duplicate:
                for offset in range(self.window):
                    yield f"Duplicate Frame: {base.shifted(offset)} has been sent."
                return
            if failed:
                yield f"Error in sending the Frame: {base}."
                continue
            for offset in range(self.window):
                yield f"Sending the Frame: {base.shifted(offset)}."
            return

    def run(self) -> Iterator[str]:
        """Yield the event log of the whole transfer, line by line."""
        base = Frame(self.first_info, self.first_seq)
        final_seq = self.first_seq + self.rounds * self.window
        duplicate = False
        for _ in range(self.rounds):
            yield from self._send(base, duplicate)
            while True:
                ack_lost = self._fails()
                if duplicate:
                    for offset in range(self.window):
                        yield (
                            f"Received the Duplicate Frame: {base.shifted(offset)}"
                            " and has been discarded."
                        )
                    duplicate = False
                if ack_lost:
                    yield "Countdown:"
                    for tick in range(5):
                        yield f"{tick}."
                    yield f"Error. Acknowledgement not sent for Frame: {base}."
                    duplicate = True
                    yield from self._send(base, duplicate)
                    continue
                for _ in range(self.window):
                    yield f"Acknowledgement received for Frame: {base}."
                    base = base.shifted(1)
                if base.seq != final_seq:
                    yield f"Sending request for the Frame: {base}."
                else:
                    yield "Sent all Frames."
                break


def main(argv: Sequence[str] | None = None) -> int:
    """Print one simulated Go-Back-N transfer."""
    parser = argparse.ArgumentParser(prog="netlab-gobackn")
    parser.add_argument("--seed", type=int, default=None, help="seed for the loss generator")
    parser.add_argument("--window", type=int, default=3, help="frames per window")
    parser.add_argument("--rounds", type=int, default=3, help="windows to send")
    args = parser.parse_args(argv)
    try:
        simulation = GoBackNSimulation(random.Random(args.seed), args.window, args.rounds)
    except ValueError as error:
        parser.error(str(error))
    for line in simulation.run():
        print(line)
    return 0