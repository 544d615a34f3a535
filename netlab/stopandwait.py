"""Stop-and-wait ARQ simulation with random frame and acknowledgement loss."""

from __future__ import annotations

import argparse
import random
import sys
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Protocol

LOSS_ODDS = 4
"""A send or an acknowledgement is lost when a draw below this value comes up 0."""

TIMER_TICKS = 5
"""Ticks the sender's timer counts before it gives up on an acknowledgement."""


class _RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


@dataclass(frozen=True)
class Frame:
    """A frame carrying an information value and a sequence number."""

    info: int
    seq: int

    def shifted(self, steps: int) -> Frame:
        """Return the frame ``steps`` positions further on."""
        return Frame(self.info + steps, self.seq + steps)

    def __str__(self) -> str:
        return f"{self.info}-{self.seq}"


class StopAndWaitSimulation:
    """Send ``frames`` frames one at a time, each waiting for its acknowledgement.

    A send fails, and an acknowledgement is lost, one time in four. A lost
    acknowledgement makes the sender time out and send the frame again, and the
    receiver discards that duplicate before acknowledging it.
    """

    def __init__(
        self,
        frames: int,
        rng: _RandomSource | None = None,
        first_info: int = 10,
        first_seq: int = 1,
    ) -> None:
        if frames < 0:
            raise ValueError("the number of frames must not be negative")
        self.frames = frames
        self.rng = rng if rng is not None else random.Random()
        self.first_info = first_info
        self.first_seq = first_seq

    def _lost(self) -> bool:
        return self.rng.randrange(LOSS_ODDS) == 0

    def _send(self, frame: Frame, duplicate: bool) -> Iterator[str]:
        while True:
            failed = self._lost()
            if duplicate:
                yield f"Duplicate Frame: {frame} has been sent."
                return
            if failed:
                yield f"Failed to send the Frame: {frame}."
                continue
            yield f"The Frame: {frame} has been sent successfully."
            return

    def run(self) -> Iterator[str]:
        """Yield the event log of the whole transfer, line by line."""
        frame = Frame(self.first_info, self.first_seq)
        duplicate = False
        for _ in range(self.frames):
            yield from self._send(frame, duplicate)
            while True:
                ack_lost = self._lost()
                if duplicate:
                    yield f"Received the Duplicate Frame: {frame}."
                    duplicate = False
                if ack_lost:
                    for tick in range(TIMER_TICKS):
                        yield f"{tick}."
                    yield f"Did not receive the acknowledgement for the Frame: {frame}."
                    duplicate = True
                    yield from self._send(frame, duplicate)
                    continue
                yield f"Acknowledgement received for the Frame: {frame}."
                frame = frame.shifted(1)
                break


def main(argv: Sequence[str] | None = None) -> int:
    """Print one simulated stop-and-wait transfer."""
    parser = argparse.ArgumentParser(prog="netlab-stopandwait")
    parser.add_argument(
        "frames",
        type=int,
        nargs="?",
        help="number of frames to send; read from standard input when omitted",
    )
    parser.add_argument("--seed", type=int, default=None, help="seed for the loss generator")
    args = parser.parse_args(argv)

    frames = args.frames
    if frames is None:
        tokens = sys.stdin.read().split()
        if not tokens:
            print("error: no frame count given", file=sys.stderr)
            return 1
        try:
            frames = int(tokens[0])
        except ValueError:
            print(f"error: {tokens[0]!r} is not a number", file=sys.stderr)
            return 1

    try:
        simulation = StopAndWaitSimulation(frames, random.Random(args.seed))
    except ValueError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    for line in simulation.run():
        print(line)
    return 0