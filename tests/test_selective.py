import socket
import threading

import pytest

from netlab.selective import (
    ACK,
    NACK,
    RECEIVER_GREETING,
    SENDER_GREETING,
    Ack,
    Packet,
    run_receiver,
    run_sender,
    sender_main,
)


class ScriptedRandom:
    def __init__(self, values, fallback=1):
        self._values = iter(values)
        self._fallback = fallback

    def randrange(self, stop):
        value = next(self._values, self._fallback)
        assert 0 <= value < stop
        return value


def _exchange(values, rng, window=4):
    left, right = socket.socketpair()
    left.settimeout(5)
    right.settimeout(5)
    result = {}

    def receive():
        try:
            result["accepted"] = run_receiver(right, rng, window, len(values))
        except Exception as error:  # surfaced through the result
            result["error"] = error

    thread = threading.Thread(target=receive)
    thread.start()
    try:
        log = run_sender(left, values, window)
    finally:
        thread.join(5)
        left.close()
        right.close()
    assert "error" not in result
    return log, result["accepted"]


def _with_fake_receiver(behaviour):
    left, right = socket.socketpair()
    left.settimeout(5)
    right.settimeout(5)
    thread = threading.Thread(target=behaviour, args=(right,))
    thread.start()
    return left, right, thread


def test_packet_round_trip():
    assert Packet.unpack(Packet(42, 3).pack()) == Packet(42, 3)


def test_ack_round_trip():
    assert Ack.unpack(Ack(7, NACK).pack()) == Ack(7, NACK)


def test_wire_layout_is_two_little_endian_ints():
    assert Packet(1, 2).pack() == b"\x01\x00\x00\x00\x02\x00\x00\x00"
    assert Ack(3, -1).pack() == b"\x03\x00\x00\x00\xff\xff\xff\xff"


def test_unpack_rejects_wrong_length():
    with pytest.raises(ValueError):
        Packet.unpack(b"\x00\x01\x02")
    with pytest.raises(ValueError):
        Ack.unpack(b"")


def test_lossless_exchange_delivers_everything_in_order():
    values = [10, 20, 30, 40, 50, 60, 70, 80]
    log, accepted = _exchange(values, ScriptedRandom([]))
    assert [p.data for p in accepted] == values
    assert [p.seq for p in accepted] == list(range(1, len(values) + 1))
    assert log[0] == "Received " + RECEIVER_GREETING.decode()
    assert sum(line.startswith("received ack for packet") for line in log) == len(values)
    assert not any(line.startswith("time expired") for line in log)


def test_rejected_packet_is_resent_and_finally_accepted():
    values = [10, 20, 30, 40, 50, 60, 70, 80]
    log, accepted = _exchange(values, ScriptedRandom([0]))
    assert sorted(p.seq for p in accepted) == list(range(1, 9))
    assert accepted[0].seq != 1
    assert "time expired for packet 1" in log
    assert "resending packet with data 10 and seq no 1" in log


def test_every_rejection_causes_one_resend():
    values = list(range(100, 108))
    log, accepted = _exchange(values, ScriptedRandom([0, 0, 0]))
    assert sum(line.startswith("time expired") for line in log) == 3
    assert sum(line.startswith("resending packet") for line in log) == 3
    assert sorted(p.data for p in accepted) == values


@pytest.mark.parametrize("window", [1, 2, 4, 8])
def test_any_window_delivers_all_packets(window):
    import random

    values = [5, 6, 7, 8, 9]
    log, accepted = _exchange(values, random.Random(window), window)
    assert sorted(p.data for p in accepted) == values
    assert len(accepted) == len({p.seq for p in accepted})


def test_empty_transfer_only_greets():
    log, accepted = _exchange([], ScriptedRandom([]))
    assert accepted == []
    assert not any("ack" in line for line in log)


def test_sender_rejects_unknown_acknowledgement_value():
    def peer(sock):
        assert sock.recv(1024) == SENDER_GREETING
        sock.sendall(RECEIVER_GREETING)
        for _ in range(4):
            sock.recv(8, socket.MSG_WAITALL)
        sock.sendall(Ack(1, 0).pack())

    left, right, thread = _with_fake_receiver(peer)
    try:
        with pytest.raises(ValueError):
            run_sender(left, [1, 2, 3, 4])
    finally:
        thread.join(5)
        left.close()
        right.close()


def test_sender_fails_when_receiver_hangs_up():
    def peer(sock):
        sock.recv(1024)
        sock.sendall(RECEIVER_GREETING)
        sock.close()

    left, right, thread = _with_fake_receiver(peer)
    try:
        with pytest.raises(ConnectionError):
            run_sender(left, [1, 2])
    finally:
        thread.join(5)
        left.close()


def test_receiver_acknowledges_with_positive_ack():
    def peer(sock):
        sock.sendall(SENDER_GREETING)
        sock.recv(1024)
        sock.sendall(Packet(9, 1).pack())
        peer.ack = Ack.unpack(sock.recv(8, socket.MSG_WAITALL))

    left, right, thread = _with_fake_receiver(peer)
    try:
        accepted = run_receiver(left, ScriptedRandom([]), 4, 1)
    finally:
        thread.join(5)
        left.close()
        right.close()
    assert accepted == [Packet(9, 1)]
    assert peer.ack == Ack(1, ACK)


def test_invalid_window_is_rejected():
    left, right = socket.socketpair()
    with left, right:
        with pytest.raises(ValueError):
            run_sender(left, [1], 0)
        with pytest.raises(ValueError):
            run_receiver(right, ScriptedRandom([]), 0, 1)


def test_sender_main_reports_refused_connection(capsys):
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    assert sender_main(["--port", str(port), "1", "2"]) == 1
    assert "error" in capsys.readouterr().err