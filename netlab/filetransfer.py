"""Send a text file to a receiver over one TCP connection."""

from __future__ import annotations

import argparse
import socket
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import BinaryIO

DEFAULT_PORT = 3033
DEFAULT_SOURCE = "send.txt"
DEFAULT_DESTINATION = "receive.txt"
CHUNK_SIZE = 1024
"""Longest piece read from the file or the socket at once."""
BACKLOG = 10


def send_file(source: BinaryIO, sock: socket.socket) -> int:
    """Send ``source`` line by line, lines split at ``CHUNK_SIZE`` bytes.

    Returns the number of bytes sent.
    """
    sent = 0
    for piece in iter(lambda: source.readline(CHUNK_SIZE), b""):
        sock.sendall(piece)
        sent += len(piece)
    return sent


def receive_file(sock: socket.socket, destination: BinaryIO) -> int:
    """Write everything read from ``sock`` to ``destination`` until the peer closes.

    Returns the number of bytes written.
    """
    received = 0
    while chunk := sock.recv(CHUNK_SIZE):
        destination.write(chunk)
        received += len(chunk)
    return received


def serve(
    host: str = "",
    port: int = DEFAULT_PORT,
    destination: str | Path = DEFAULT_DESTINATION,
) -> int:
    """Accept one connection and store what it sends in ``destination``.

    Returns the number of bytes written.
    """
    with socket.create_server((host, port), backlog=BACKLOG) as server:
        conn, _ = server.accept()
        with conn, open(destination, "wb") as output:
            return receive_file(conn, output)


def upload(
    path: str | Path = DEFAULT_SOURCE,
    host: str = "127.0.0.1",
    port: int = DEFAULT_PORT,
) -> int:
    """Send the file at ``path`` to a receiver. Returns the number of bytes sent."""
    with open(path, "rb") as source:
        with socket.create_connection((host, port)) as sock:
            return send_file(source, sock)


def sender_main(argv: Sequence[str] | None = None) -> int:
    """Send one file to a waiting receiver."""
    parser = argparse.ArgumentParser(prog="netlab-ftp-send")
    parser.add_argument("path", nargs="?", default=DEFAULT_SOURCE)
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)
    try:
        sent = upload(args.path, args.host, args.port)
    except OSError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    print(f"File data sent successfully ({sent} bytes).")
    print("Closing the connection.")
    return 0


def receiver_main(argv: Sequence[str] | None = None) -> int:
    """Wait for one sender and write its file."""
    parser = argparse.ArgumentParser(prog="netlab-ftp-receive")
    parser.add_argument("--host", default="")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--output", default=DEFAULT_DESTINATION)
    args = parser.parse_args(argv)
    print("Listening...")
    try:
        received = serve(args.host, args.port, args.output)
        text = Path(args.output).read_text(errors="replace")
    except OSError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    print(text, end="" if text.endswith("\n") else "\n")
    print(f"Data has been successfully written ({received} bytes).")
    return 0