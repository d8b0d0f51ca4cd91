[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "singtun"
version = "0.1.0"
description = "Mutable IP, TCP, UDP and ICMP packet views with Internet checksums, plus IP Helper socket-address and enumeration types"
requires-python = ">=3.10"
dependencies = []
keywords = ["tun", "tcpip", "checksum", "ipv4", "ipv6", "icmp", "packet"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["singtun"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
