import socket
import threading

import pytest

from netlab.udpmessage import (
    MAX_TEXT_BYTES,
    MESSAGE_SIZE,
    client_main,
    receive_datagram,
    send_datagram,
    serve_once,
)


@pytest.fixture
def receiver():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(5)
    yield sock
    sock.close()


def _port(sock):
    return sock.getsockname()[1]


def _raw_sender():
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM)


def test_round_trip(receiver):
    sent = send_datagram("Hello There", "127.0.0.1", _port(receiver))
    assert sent == "Hello There"
    assert receive_datagram(receiver) == "Hello There"


def test_datagram_is_fixed_size_and_nul_padded(receiver):
    send_datagram("Hello There", "127.0.0.1", _port(receiver))
    data, _ = receiver.recvfrom(4096)
    assert len(data) == MESSAGE_SIZE
    assert data.startswith(b"Hello There")
    assert set(data[len(b"Hello There"):]) == {0}


def test_long_message_is_cut_short(receiver):
    message = "x" * (MESSAGE_SIZE * 2)
    sent = send_datagram(message, "127.0.0.1", _port(receiver))
    assert sent == message[:MAX_TEXT_BYTES]
    assert receive_datagram(receiver) == sent


def test_multibyte_message_is_cut_on_a_character_boundary(receiver):
    message = "\u00e9" * MESSAGE_SIZE
    sent = send_datagram(message, "127.0.0.1", _port(receiver))
    assert len(sent.encode("utf-8")) <= MAX_TEXT_BYTES
    assert message.startswith(sent)
    assert receive_datagram(receiver) == sent


def test_nul_in_message_is_rejected(receiver):
    with pytest.raises(ValueError):
        send_datagram("a\0b", "127.0.0.1", _port(receiver))


def test_receive_stops_at_first_nul(receiver):
    with _raw_sender() as sender:
        sender.sendto(b"abc\0def", ("127.0.0.1", _port(receiver)))
    assert receive_datagram(receiver) == "abc"


def test_receive_without_nul_keeps_whole_text(receiver):
    with _raw_sender() as sender:
        sender.sendto(b"plain text", ("127.0.0.1", _port(receiver)))
    assert receive_datagram(receiver) == "plain text"


def test_serve_once_returns_message():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
        probe.bind(("127.0.0.1", 0))
        port = _port(probe)

    stop = threading.Event()

    def keep_sending():
        with _raw_sender() as sender:
            while not stop.is_set():
                sender.sendto(b"Hello There\0", ("127.0.0.1", port))
                stop.wait(0.05)

    sender_thread = threading.Thread(target=keep_sending, daemon=True)
    sender_thread.start()
    try:
        message = serve_once("127.0.0.1", port)
    finally:
        stop.set()
        sender_thread.join()
    assert message == "Hello There"


def test_client_main_sends_argument(receiver, capsys):
    code = client_main(["Hello There", "--host", "127.0.0.1", "--port", str(_port(receiver))])
    assert code == 0
    assert receive_datagram(receiver) == "Hello There"
    assert "Successfully Sent" in capsys.readouterr().out


def test_client_main_reports_nul(receiver, capsys):
    code = client_main(["a\0b", "--port", str(_port(receiver))])
    assert code == 1
    assert "Failed to send" in capsys.readouterr().err