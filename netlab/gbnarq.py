"""Go-Back-N ARQ over a stream socket, with one simulated corrupted packet."""

from __future__ import annotations

import argparse
import select
import socket
import sys
from collections.abc import Sequence

DEFAULT_PORT = 3033
DEFAULT_LAST_PACKET = 9
WINDOW = 3
"""Packets the sender may have in flight before it must wait for an acknowledgement."""

REQUEST = "REQUEST"
"""First message of the receiver, asking the sender to start."""

CORRUPTED_PACKET = 3
"""The first arrival of this packet is treated as corrupted by the receiver."""
RETRANSMIT_FROM = 1
"""Packet the receiver asks for again after the corrupted one."""


class _LineChannel:
    """Newline-delimited ASCII messages over a stream socket."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock
        self._buffer = bytearray()

    def send(self, text: str) -> None:
        self.sock.sendall(text.encode("ascii") + b"\n")

    def _take(self) -> str | None:
        end = self._buffer.find(b"\n")
        if end < 0:
            return None
        line = bytes(self._buffer[:end])
        del self._buffer[: end + 1]
        try:
            return line.decode("ascii").strip()
        except UnicodeDecodeError:
            raise ValueError(f"message is not ASCII: {line!r}") from None

    def _fill(self) -> None:
        chunk = self.sock.recv(4096)
        if not chunk:
            raise ConnectionError("connection closed by the peer")
        self._buffer += chunk

    def receive(self) -> str:
        """Wait for the next whole message."""
        while (line := self._take()) is None:
            self._fill()
        return line

    def poll(self) -> str | None:
        """Return the next message if one is already available, without waiting."""
        line = self._take()
        if line is None:
            ready, _, _ = select.select([self.sock], [], [], 0)
            if ready:
                self._fill()
                line = self._take()
        return line


def _check_last(last_packet: int) -> None:
    if last_packet < 1:
        raise ValueError("at least one packet must be sent")


def _parse_reply(reply: str, last_packet: int) -> tuple[str, int]:
    if len(reply) < 2 or reply[0] not in "RA":
        raise ValueError(f"unknown reply {reply!r}")
    try:
        number = int(reply[1:])
    except ValueError:
        raise ValueError(f"unknown reply {reply!r}") from None
    if not 1 <= number <= last_packet:
        raise ValueError(f"reply {reply!r} names a packet outside 1..{last_packet}")
    return reply[0], number


def serve_packets(conn: socket.socket, last_packet: int = DEFAULT_LAST_PACKET) -> list[str]:
    """Wait for the receiver's request, then send packets 1..``last_packet``.

    At most ``WINDOW`` packets are unacknowledged at a time. A retransmit
    request ``R<n>`` makes the sender go back and continue from packet ``n``;
    an acknowledgement ``A<n>`` moves the window past ``n``. Returns the event
    log once the last packet is acknowledged.
    """
    _check_last(last_packet)
    channel = _LineChannel(conn)
    request = channel.receive()
    if request != REQUEST:
        raise ValueError(f"unexpected request {request!r}")
    log = ["Received a request from the client, sending packets one by one..."]

    window_start = 1
    current = 1
    while window_start <= last_packet:
        if current < window_start + WINDOW and current <= last_packet:
            channel.send(str(current))
            log.append(f"Packet Sent: {current}")
            current += 1
            reply = channel.poll()
        else:
            reply = channel.receive()
        if reply is None:
            continue
        kind, number = _parse_reply(reply, last_packet)
        if kind == "R":
            log.append(f"Received a RETRANSMIT for packet {number}. Resending packet {number}...")
            channel.send(str(number))
            log.append(f"Packet Sent: {number}")
            current = number + 1
        else:
            window_start = number + 1
            if number == last_packet:
                log.append(f"Received ACK {number}!!!")
            else:
                log.append(f"Received ACK {number}. Moving window boundary.")
    log.append("Sending complete.")
    return log


def receive_packets(sock: socket.socket, last_packet: int = DEFAULT_LAST_PACKET) -> list[int]:
    """Request packets and take them until ``last_packet`` arrives.

    The first arrival of ``CORRUPTED_PACKET`` is answered with a retransmit
    request for ``RETRANSMIT_FROM``. Otherwise every ``WINDOW``-th packet, and
    the last one, is acknowledged cumulatively. Returns the packet numbers in
    the order they arrived, repeats included.
    """
    _check_last(last_packet)
    channel = _LineChannel(sock)
    channel.send(REQUEST)

    arrived: list[int] = []
    first_time = True
    wait = WINDOW
    while True:
        line = channel.receive()
        try:
            packet = int(line)
        except ValueError:
            raise ValueError(f"malformed packet {line!r}") from None
        arrived.append(packet)
        if packet == CORRUPTED_PACKET and first_time:
            first_time = False
            wait = WINDOW
            channel.send(f"R{RETRANSMIT_FROM}")
            continue
        wait -= 1
        if wait == 0 or packet == last_packet:
            channel.send(f"A{packet}")
            wait = WINDOW
        if packet == last_packet:
            return arrived


def sender_main(argv: Sequence[str] | None = None) -> int:
    """Wait for one receiver and send it the packets."""
    parser = argparse.ArgumentParser(prog="netlab-gbn-send")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--last", type=int, default=DEFAULT_LAST_PACKET, help="last packet number")
    args = parser.parse_args(argv)
    print("Starting up...")
    try:
        with socket.create_server((args.host, args.port), backlog=1) as server:
            conn, _ = server.accept()
            with conn:
                log = serve_packets(conn, args.last)
    except (OSError, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    for line in log:
        print(line)
    print("Socket closed. Exiting...")
    return 0


def receiver_main(argv: Sequence[str] | None = None) -> int:
    """Connect to a sender and receive its packets."""
    parser = argparse.ArgumentParser(prog="netlab-gbn-receive")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--last", type=int, default=DEFAULT_LAST_PACKET, help="last packet number")
    args = parser.parse_args(argv)
    print("Starting up...")
    print("Establishing Connection...")
    try:
        with socket.create_connection((args.host, args.port)) as sock:
            arrived = receive_packets(sock, args.last)
    except (OSError, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    for packet in arrived:
        print(f"Got packet: {packet}")
    print("All packets received...Exiting.")
    return 0