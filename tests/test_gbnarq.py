import socket
import threading

import pytest

from netlab.gbnarq import receive_packets, serve_packets


def _pair():
    a, b = socket.socketpair()
    a.settimeout(5)
    b.settimeout(5)
    return a, b


def _run_transfer(last_packet):
    sender_sock, receiver_sock = _pair()
    result = {}

    def run_sender():
        try:
            result["log"] = serve_packets(sender_sock, last_packet)
        except Exception as error:  # surfaced by the assertions below
            result["error"] = error

    thread = threading.Thread(target=run_sender)
    thread.start()
    try:
        arrived = receive_packets(receiver_sock, last_packet)
        thread.join(10)
    finally:
        sender_sock.close()
        receiver_sock.close()
    assert "error" not in result
    return arrived, result["log"]


def _read_all(sock):
    data = b""
    while chunk := sock.recv(4096):
        data += chunk
    return data


def test_default_transfer_goes_back_once():
    arrived, log = _run_transfer(9)
    assert arrived == [1, 2, 3, 1, 2, 3, 4, 5, 6, 7, 8, 9]
    assert log[-2] == "Received ACK 9!!!"


def test_every_sent_packet_arrives():
    arrived, log = _run_transfer(9)
    sent = [int(line.split(": ")[1]) for line in log if line.startswith("Packet Sent:")]
    assert sent == arrived


def test_short_transfer_acknowledges_last_packet():
    arrived, log = _run_transfer(5)
    assert arrived[-1] == 5
    assert set(arrived) == {1, 2, 3, 4, 5}
    assert "Received ACK 5!!!" in log


def test_transfer_without_corrupted_packet():
    arrived, _ = _run_transfer(2)
    assert arrived == [1, 2]


def test_receiver_wire_messages():
    receiver_sock, peer = _pair()
    peer.sendall(b"1\n2\n3\n1\n2\n3\n")
    arrived = receive_packets(receiver_sock, 3)
    receiver_sock.close()
    wire = _read_all(peer)
    peer.close()
    assert arrived == [1, 2, 3, 1, 2, 3]
    assert wire == b"REQUEST\nR1\nA3\n"


def test_receiver_rejects_malformed_packet():
    receiver_sock, peer = _pair()
    peer.sendall(b"one\n")
    with pytest.raises(ValueError):
        receive_packets(receiver_sock, 3)
    receiver_sock.close()
    peer.close()


def test_sender_rejects_unknown_reply():
    sender_sock, peer = _pair()
    peer.sendall(b"REQUEST\nX1\n")
    with pytest.raises(ValueError):
        serve_packets(sender_sock, 9)
    sender_sock.close()
    peer.close()


def test_sender_rejects_wrong_request():
    sender_sock, peer = _pair()
    peer.sendall(b"HELLO\n")
    with pytest.raises(ValueError):
        serve_packets(sender_sock, 9)
    sender_sock.close()
    peer.close()


def test_sender_notices_closed_peer():
    sender_sock, peer = _pair()
    peer.sendall(b"REQUEST\n")
    peer.close()
    with pytest.raises(ConnectionError):
        serve_packets(sender_sock, 9)
    sender_sock.close()


@pytest.mark.parametrize("last_packet", [0, -3])
def test_invalid_last_packet(last_packet):
    a, b = _pair()
    with pytest.raises(ValueError):
        serve_packets(a, last_packet)
    with pytest.raises(ValueError):
        receive_packets(b, last_packet)
    a.close()
    b.close()