"""Selective-repeat ARQ over a stream socket: a sender and a lossy receiver."""

from __future__ import annotations

import argparse
import random
import socket
import struct
import sys
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol

DEFAULT_PORT = 2069
DEFAULT_WINDOW = 4
DEFAULT_FRAMES = 8

ACK = 1
"""Acknowledgement value for a packet that arrived intact."""
NACK = -1
"""Acknowledgement value asking for a packet to be sent again."""

SENDER_GREETING = b"hai"
RECEIVER_GREETING = b"hello"

_PAIR = struct.Struct("<ii")
_GREETING_LIMIT = 1024


class _RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


def _unpack_pair(data: bytes) -> tuple[int, int]:
    if len(data) != _PAIR.size:
        raise ValueError(f"expected {_PAIR.size} bytes, got {len(data)}")
    return _PAIR.unpack(data)


@dataclass(frozen=True)
class Packet:
    """A data packet: two little-endian 32-bit integers, data then sequence number."""

    data: int
    seq: int

    def pack(self) -> bytes:
        return _PAIR.pack(self.data, self.seq)

    @classmethod
    def unpack(cls, data: bytes) -> Packet:
        return cls(*_unpack_pair(data))


@dataclass(frozen=True)
class Ack:
    """An acknowledgement: sequence number then ``ACK`` or ``NACK``."""

    seq: int
    ack: int

    def pack(self) -> bytes:
        return _PAIR.pack(self.seq, self.ack)

    @classmethod
    def unpack(cls, data: bytes) -> Ack:
        return cls(*_unpack_pair(data))


def _recv_exact(sock: socket.socket, count: int) -> bytes:
    buffer = bytearray()
    while len(buffer) < count:
        chunk = sock.recv(count - len(buffer))
        if not chunk:
            raise ConnectionError("connection closed before a whole message arrived")
        buffer += chunk
    return bytes(buffer)


def _recv_greeting(sock: socket.socket) -> bytes:
    greeting = sock.recv(_GREETING_LIMIT)
    if not greeting:
        raise ConnectionError("connection closed during the greeting")
    return greeting


def run_sender(
    sock: socket.socket, values: Iterable[int], window: int = DEFAULT_WINDOW
) -> list[str]:
    """Send ``values`` as numbered packets, resending any the receiver rejects.

    Returns the event log. Raises ``ValueError`` on an acknowledgement the
    protocol does not know and ``ConnectionError`` if the peer goes away.
    """
    if window <= 0:
        raise ValueError("the window must hold at least one packet")
    packets = [Packet(value, seq) for seq, value in enumerate(values, start=1)]
    log: list[str] = []

    def transmit(packet: Packet, verb: str = "sending") -> None:
        sock.sendall(packet.pack())
        log.append(f"{verb} packet with data {packet.data} and seq no {packet.seq}")

    sock.sendall(SENDER_GREETING)
    reply = _recv_greeting(sock)
    log.append(f"Received {reply.decode(errors='replace')}")
    log.append(f"Sending frames: {len(packets)}, window size {window}")

    for packet in packets[:window]:
        transmit(packet)
    next_index = min(window, len(packets))

    acknowledged = 0
    while acknowledged < len(packets):
        ack = Ack.unpack(_recv_exact(sock, _PAIR.size))
        if ack.ack == ACK:
            acknowledged += 1
            log.append(f"received ack for packet {ack.seq}")
            if next_index < len(packets):
                transmit(packets[next_index])
                next_index += 1
        elif ack.ack == NACK:
            if not 1 <= ack.seq <= len(packets):
                raise ValueError(f"negative acknowledgement for unknown packet {ack.seq}")
            log.append(f"time expired for packet {ack.seq}")
            transmit(packets[ack.seq - 1], "resending")
        else:
            raise ValueError(f"unknown acknowledgement value {ack.ack}")
    return log


def run_receiver(
    sock: socket.socket,
    rng: _RandomSource | None = None,
    window: int = DEFAULT_WINDOW,
    total: int = DEFAULT_FRAMES,
) -> list[Packet]:
    """Receive ``total`` packets, rejecting one in three at random.

    Packets are taken in arrival order; a rejected one is answered with a
    ``NACK`` and comes back later. Returns the packets accepted, in the order
    they were accepted.
    """
    if window <= 0:
        raise ValueError("the window must hold at least one packet")
    if total < 0:
        raise ValueError("the number of packets must not be negative")
    rng = rng if rng is not None else random.Random()

    _recv_greeting(sock)
    sock.sendall(RECEIVER_GREETING)

    def read_packet() -> Packet:
        return Packet.unpack(_recv_exact(sock, _PAIR.size))

    queue = deque(read_packet() for _ in range(min(window, total)))
    received = len(queue)
    expected = total
    accepted: list[Packet] = []
    while len(accepted) < total:
        packet = queue.popleft()
        rejected = rng.randrange(3) == 0
        sock.sendall(Ack(packet.seq, NACK if rejected else ACK).pack())
        if rejected:
            expected += 1
        else:
            accepted.append(packet)
        if received < expected:
            queue.append(read_packet())
            received += 1
    return accepted


def _read_ints(text: str) -> list[int]:
    return [int(token) for token in text.split()]


def sender_main(argv: Sequence[str] | None = None) -> int:
    """Connect to a receiver and send the given values."""
    parser = argparse.ArgumentParser(prog="netlab-selective-send")
    parser.add_argument("values", type=int, nargs="*", help="packet data; read from stdin if none")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--window", type=int, default=DEFAULT_WINDOW)
    args = parser.parse_args(argv)
    try:
        values = args.values or _read_ints(sys.stdin.read())
        with socket.create_connection((args.host, args.port)) as sock:
            log = run_sender(sock, values, args.window)
    except (OSError, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    for line in log:
        print(line)
    return 0


def receiver_main(argv: Sequence[str] | None = None) -> int:
    """Wait for one sender and receive its packets."""
    parser = argparse.ArgumentParser(prog="netlab-selective-receive")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--window", type=int, default=DEFAULT_WINDOW)
    parser.add_argument("--frames", type=int, default=DEFAULT_FRAMES)
    parser.add_argument("--seed", type=int, default=None, help="seed for the loss generator")
    args = parser.parse_args(argv)
    try:
        with socket.create_server((args.host, args.port), backlog=3) as server:
            conn, _ = server.accept()
            with conn:
                accepted = run_receiver(conn, random.Random(args.seed), args.window, args.frames)
    except (OSError, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    for packet in accepted:
        print(f"Received Packet with data {packet.data} and seq {packet.seq}")
    return 0