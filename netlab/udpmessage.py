"""Send one short text message from a client to a server as a UDP datagram."""

from __future__ import annotations

import argparse
import socket
import sys
from collections.abc import Sequence

from .tcpmessage import MAX_TEXT_BYTES, MESSAGE_SIZE, _fit

DEFAULT_PORT = 3003

__all__ = [
    "DEFAULT_PORT",
    "MAX_TEXT_BYTES",
    "MESSAGE_SIZE",
    "receive_datagram",
    "serve_once",
    "send_datagram",
    "server_main",
    "client_main",
]


def receive_datagram(sock: socket.socket) -> str:
    """Wait for one datagram on a bound socket and return the text it carries.

    At most ``MESSAGE_SIZE`` bytes are read. The text ends at the first NUL.
    """
    data, _ = sock.recvfrom(MESSAGE_SIZE)
    text, _, _ = data.partition(b"\0")
    return text.decode("utf-8", errors="replace")


def serve_once(host: str = "", port: int = DEFAULT_PORT) -> str:
    """Bind to ``host``:``port``, take one datagram and return its text."""
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind((host, port))
        return receive_datagram(sock)


def send_datagram(message: str, host: str = "127.0.0.1", port: int = DEFAULT_PORT) -> str:
    """Send ``message`` to ``host``:``port`` as one fixed-size datagram.

    Text longer than ``MAX_TEXT_BYTES`` bytes is cut short. Returns the text
    that was actually sent.
    """
    payload = _fit(message)
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.sendto(payload.ljust(MESSAGE_SIZE, b"\0"), (host, port))
    return payload.decode("utf-8")


def server_main(argv: Sequence[str] | None = None) -> int:
    """Wait for one datagram and print the message it carries."""
    parser = argparse.ArgumentParser(prog="netlab-udp-server")
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    try:
        message = serve_once(args.host, args.port)
    except OSError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    print(f"The Message Received:{message}")
    return 0


def client_main(argv: Sequence[str] | None = None) -> int:
    """Send one message, given as an argument or read as a line from standard input."""
    parser = argparse.ArgumentParser(prog="netlab-udp-client")
    parser.add_argument("message", nargs="?", help="text to send; read from stdin when omitted")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    message = args.message
    if message is None:
        print("Enter the string to be sent:", end="", flush=True)
        message = sys.stdin.readline().rstrip("\r\n")
    try:
        send_datagram(message, args.host, args.port)
    except (OSError, ValueError) as error:
        print(f"Failed to send: {error}", file=sys.stderr)
        return 1
    print("Successfully Sent")
    return 0