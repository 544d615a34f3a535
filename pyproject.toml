[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netlab"
version = "0.1.0"
description = "Computer-networking exercises: routing, traffic shaping, ARQ protocol simulations and small socket tools"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "networking",
    "dijkstra",
    "link-state",
    "leaky-bucket",
    "go-back-n",
    "stop-and-wait",
    "selective-repeat",
    "sockets",
    "tcp",
    "udp",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
netlab-linkstate = "netlab.linkstate:main"
netlab-leakybucket = "netlab.leakybucket:main"
netlab-gobackn = "netlab.gobackn:main"
netlab-stopandwait = "netlab.stopandwait:main"
netlab-selective-send = "netlab.selective:sender_main"
netlab-selective-receive = "netlab.selective:receiver_main"
netlab-gbn-send = "netlab.gbnarq:sender_main"
netlab-gbn-receive = "netlab.gbnarq:receiver_main"
netlab-ftp-send = "netlab.filetransfer:sender_main"
netlab-ftp-receive = "netlab.filetransfer:receiver_main"
netlab-tcp-server = "netlab.tcpmessage:server_main"
netlab-tcp-client = "netlab.tcpmessage:client_main"
netlab-udp-server = "netlab.udpmessage:server_main"
netlab-udp-client = "netlab.udpmessage:client_main"

[tool.hatch.build.targets.wheel]
packages = ["netlab"]

[tool.pytest.ini_options]
addopts = "-ra"
