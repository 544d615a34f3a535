# netlab

Small, self-contained computer-networking exercises: a routing calculation,
traffic-shaping and ARQ simulations, and a few one-shot socket tools.

| Module | What it does |
| --- | --- |
| `netlab.linkstate` | Shortest paths from one router over a cost matrix (Dijkstra) |
| `netlab.leakybucket` | Leaky-bucket traffic shaping, a timed model and a simple model |
| `netlab.gobackn` | Go-Back-N simulation with random frame and acknowledgement loss |
| `netlab.stopandwait` | Stop-and-wait simulation with random frame and acknowledgement loss |
| `netlab.selective` | Selective repeat over a TCP connection, with a lossy receiver |
| `netlab.gbnarq` | Go-Back-N over a TCP connection, with one simulated corrupted packet |
| `netlab.filetransfer` | Send a file over one TCP connection to a receiver that stores it |
| `netlab.tcpmessage` | Pass one short text message over TCP |
| `netlab.udpmessage` | Pass one short text message as a UDP datagram |

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Commands

### Calculations and simulations

`netlab-linkstate` reads whitespace-separated numbers from standard input: the
number of routers, the cost matrix row by row, then the source router. A cost
of 1000, or any negative cost, means no link. It prints each destination's path,
written from the destination back to the source, and its cost.

```
printf '3\n0 4 1\n4 0 2\n1 2 0\n0\n' | netlab-linkstate
```

`netlab-leakybucket simple` reads the bucket size, the outgoing rate, the number
of inputs and then each input size. `netlab-leakybucket timed` reads the number
of packets, the arrival time and size of each packet (in order of arrival), the
bucket size and the output rate.

```
printf '500 200 3\n200 700 500\n' | netlab-leakybucket simple
```

`netlab-gobackn` prints one simulated transfer. Options: `--seed`, `--window`
(frames per window, default 3), `--rounds` (windows to send, default 3). Each
send and each acknowledgement fails half the time.

`netlab-stopandwait [FRAMES]` prints one simulated transfer of `FRAMES` frames,
reading the count from standard input when it is not given. Option: `--seed`.
Each send and each acknowledgement is lost one time in four.

### Networked pairs

Start the first command of each pair, then its partner in a second terminal.

| First | Then | Default port |
| --- | --- | --- |
| `netlab-selective-receive` | `netlab-selective-send` | 2069 |
| `netlab-gbn-send` | `netlab-gbn-receive` | 3033 |
| `netlab-ftp-receive` | `netlab-ftp-send` | 3033 |
| `netlab-tcp-server` | `netlab-tcp-client` | 3003 |
| `netlab-udp-server` | `netlab-udp-client` | 3003 |

Every one of them takes `--host` and `--port`. Others:

- `netlab-selective-send [VALUES...] [--window N]` sends the values as numbered
  packets, reading them from standard input when none are given.
  `netlab-selective-receive [--window N] [--frames N] [--seed N]` rejects one
  packet in three at random and asks for it again.
- `netlab-gbn-send [--last N]` and `netlab-gbn-receive [--last N]` exchange
  packets 1 to N (default 9) with a window of 3. The receiver treats the first
  arrival of packet 3 as corrupted and asks for a retransmission from packet 1.
- `netlab-ftp-send [PATH]` sends `send.txt` by default;
  `netlab-ftp-receive [--output FILE]` writes to `receive.txt` by default and
  prints what it received.
- `netlab-tcp-client [MESSAGE]` and `netlab-udp-client [MESSAGE]` read one line
  from standard input when no message is given. A message travels as exactly
  100 bytes, so text longer than 99 bytes is cut short.

## Library use

```python
import random

from netlab.linkstate import format_routes, shortest_paths
from netlab.gobackn import GoBackNSimulation
from netlab.stopandwait import StopAndWaitSimulation

costs = [
    [0, 6, 1000, 1, 1000],
    [6, 0, 5, 2, 2],
    [1000, 5, 0, 1000, 5],
    [1, 2, 1000, 0, 1],
    [1000, 2, 5, 1, 0],
]
print(format_routes(shortest_paths(costs, 0), 0))

# run() yields the event log line by line; a seeded generator makes it repeatable.
for line in GoBackNSimulation(random.Random(1)).run():
    print(line)
log = list(StopAndWaitSimulation(10, random.Random(1)).run())
```

`netlab.leakybucket` offers `simulate_timed(packets, bucket_size, output_rate)`,
yielding one `Tick` per time unit, and `simulate_simple(incoming_sizes,
bucket_size, outgoing_rate)`, yielding one `Step` per input.

The socket helpers work on sockets or addresses you supply:

- `netlab.tcpmessage`: `serve_once`, `receive_message`, `send_message`
- `netlab.udpmessage`: `serve_once`, `receive_datagram`, `send_datagram`
- `netlab.filetransfer`: `serve`, `upload`, `send_file`, `receive_file`
- `netlab.selective`: `run_sender`, `run_receiver`, and the `Packet` and `Ack` wire formats
- `netlab.gbnarq`: `serve_packets`, `receive_packets`

## What it does not do

- The file transfer is a bare byte stream over one connection. It does not
  implement the FTP protocol: there are no commands, logins or directory
  listings, and each receiver takes a single connection and then exits.
- The TCP and UDP servers take one message each and exit; they send no reply.
- The ARQ simulations only print event logs. They carry no real data and do not
  measure timing.