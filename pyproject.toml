[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xfrpkit"
version = "1.0.1"
description = "Client-side building blocks for a frp-style reverse proxy: control messages, framing, FTP passive-mode rewriting and helpers"
requires-python = ">=3.10"
dependencies = [
    "psutil",
]
keywords = [
    "frp",
    "reverse-proxy",
    "tunnel",
    "nat-traversal",
    "ftp",
    "pbkdf2",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Proxy Servers",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["xfrpkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
