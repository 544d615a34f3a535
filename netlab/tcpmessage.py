"""Send one short text message from a client to a server over TCP."""

from __future__ import annotations

import argparse
import socket
import sys
from collections.abc import Sequence

DEFAULT_PORT = 3003
MESSAGE_SIZE = 100
"""Every message travels as exactly this many bytes, padded with NULs."""
MAX_TEXT_BYTES = MESSAGE_SIZE - 1
"""Longest text that fits in a message; one byte is kept for the terminating NUL."""


def _fit(message: str) -> bytes:
    if "\0" in message:
        raise ValueError("a message cannot contain a NUL character")
    encoded = message.encode("utf-8")[:MAX_TEXT_BYTES]
    # Drop any character cut in half by the limit.
    return encoded.decode("utf-8", errors="ignore").encode("utf-8")


def receive_message(server_socket: socket.socket) -> str:
    """Accept one connection on a listening socket and return the text it sends.

    Reads up to ``MESSAGE_SIZE`` bytes, or until the peer closes, and keeps
    the text before the first NUL. A peer that sends nothing yields ``""``.
    """
    conn, _ = server_socket.accept()
    with conn:
        data = bytearray()
        while len(data) < MESSAGE_SIZE:
            chunk = conn.recv(MESSAGE_SIZE - len(data))
            if not chunk:
                break
            data += chunk
    text, _, _ = bytes(data).partition(b"\0")
    return text.decode("utf-8", errors="replace")


def serve_once(host: str = "", port: int = DEFAULT_PORT) -> str:
    """Listen on ``host``:``port``, take one message and return it."""
    with socket.create_server((host, port), backlog=1) as server:
        return receive_message(server)


def send_message(message: str, host: str = "127.0.0.1", port: int = DEFAULT_PORT) -> str:
    """Connect to a server and send ``message`` as one fixed-size message.

    Text longer than ``MAX_TEXT_BYTES`` bytes is cut short. Returns the text
    that was actually sent.
    """
    payload = _fit(message)
    with socket.create_connection((host, port)) as sock:
        sock.sendall(payload.ljust(MESSAGE_SIZE, b"\0"))
    return payload.decode("utf-8")


def server_main(argv: Sequence[str] | None = None) -> int:
    """Wait for one client and print the message it sends."""
    parser = argparse.ArgumentParser(prog="netlab-tcp-server")
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    print("Listening...")
    try:
        message = serve_once(args.host, args.port)
    except OSError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    print(f"The Message Received:{message}")
    return 0


def client_main(argv: Sequence[str] | None = None) -> int:
    """Send one message, given as an argument or read as a line from standard input."""
    parser = argparse.ArgumentParser(prog="netlab-tcp-client")
    parser.add_argument("message", nargs="?", help="text to send; read from stdin when omitted")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    message = args.message
    if message is None:
        print("Enter the string to be sent:", end="", flush=True)
        message = sys.stdin.readline().rstrip("\r\n")
    try:
        send_message(message, args.host, args.port)
    except (OSError, ValueError) as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    print("Sent Successfully")
    return 0