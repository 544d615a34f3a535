"""Leaky-bucket traffic shaping simulations."""

from __future__ import annotations

import argparse
import sys
from collections import deque
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import TextIO


@dataclass(frozen=True)
class Packet:
    """A packet arriving at ``time`` carrying ``size`` bytes."""

    time: int
    size: int


@dataclass(frozen=True)
class Tick:
    """What happened to the bucket during one time unit."""

    time: int
    arrival: Packet | None
    accepted: bool
    transferred: int
    level: int

    def describe(self) -> list[str]:
        lines = [f"At time {self.time}"]
        if self.arrival is not None:
            verdict = "inserted" if self.accepted else "discarded"
            lines.append(f"{self.arrival.size}byte packet is {verdict}")
        if self.transferred:
            lines.append(f"{self.transferred}bytes transferred")
        else:
            lines.append("No packets to transmit")
        lines.append(f"Packets in the bucket {self.level}byte")
        return lines


@dataclass(frozen=True)
class Step:
    """One input of the simple model: what came in, what was dropped, what is left."""

    incoming: int
    dropped: int
    level: int
    remaining: int

    @property
    def accepted(self) -> bool:
        return self.dropped == 0


def simulate_timed(
    packets: Iterable[Packet], bucket_size: int, output_rate: int
) -> Iterator[Tick]:
    """Run the bucket from time 1 until the last arrival has passed and it is empty.

    At most one packet is taken per time unit; a packet that does not fit is
    discarded whole.
    """
    queue = deque(packets)
    if not queue:
        raise ValueError("at least one packet is needed")
    if output_rate <= 0:
        raise ValueError("the output rate must be positive")
    if bucket_size < 0:
        raise ValueError("the bucket size must not be negative")
    if any(later.time < earlier.time for earlier, later in zip(queue, list(queue)[1:])):
        raise ValueError("packets must be given in order of arrival time")

    last_time = queue[-1].time
    level = 0
    time = 1
    while time <= last_time or level != 0:
        arrival = None
        accepted = False
        if queue and queue[0].time == time:
            arrival = queue.popleft()
            accepted = level + arrival.size <= bucket_size
            if accepted:
                level += arrival.size
        transferred = min(level, output_rate)
        level -= transferred
        yield Tick(time, arrival, accepted, transferred, level)
        time += 1


def simulate_simple(
    incoming_sizes: Iterable[int], bucket_size: int, outgoing_rate: int
) -> Iterator[Step]:
    """Fill the bucket with each input in turn, then drain ``outgoing_rate``.

    Overflow fills the bucket to the brim and drops the excess. The level is
    reduced by the full rate after every input and is not clamped at zero.
    """
    store = 0
    for incoming in incoming_sizes:
        if incoming <= bucket_size - store:
            store += incoming
            step_level, dropped = store, 0
        else:
            step_level, dropped = store, incoming + store - bucket_size
            store = bucket_size
        store -= outgoing_rate
        yield Step(incoming, dropped, step_level, store)


def _step_lines(step: Step, bucket_size: int) -> list[str]:
    lines = [
        f"The Number of packets entering:{step.incoming}",
        f"The buffer size: {step.level} out of {bucket_size}",
    ]
    if not step.accepted:
        lines.append(f"Dropped {step.dropped} packets from the buckets")
    lines.append(
        f"{step.remaining} packets are left after outgoing from the bucket of size {bucket_size}"
    )
    return lines


def _read_ints(stream: TextIO) -> Iterator[int]:
    for line in stream:
        for token in line.split():
            yield int(token)


def main(argv: Sequence[str] | None = None) -> int:
    """Run one of the two bucket models on numbers read from standard input."""
    parser = argparse.ArgumentParser(prog="netlab-leakybucket")
    modes = parser.add_subparsers(dest="mode", required=True)
    modes.add_parser(
        "simple",
        help="stdin: bucket size, outgoing rate, input count, then the input sizes",
    )
    modes.add_parser(
        "timed",
        help="stdin: packet count, time and size of each packet, bucket size, output rate",
    )
    args = parser.parse_args(argv)
    numbers = _read_ints(sys.stdin)
    try:
        if args.mode == "simple":
            bucket_size, rate, count = next(numbers), next(numbers), next(numbers)
            sizes = [next(numbers) for _ in range(count)]
            for step in simulate_simple(sizes, bucket_size, rate):
                print("\n".join(_step_lines(step, bucket_size)))
        else:
            count = next(numbers)
            packets = [Packet(next(numbers), next(numbers)) for _ in range(count)]
            bucket_size, rate = next(numbers), next(numbers)
            for tick in simulate_timed(packets, bucket_size, rate):
                print("\n".join(tick.describe()))
    except StopIteration:
        print("error: input ended early", file=sys.stderr)
        return 1
    except ValueError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    return 0