[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tickerfeed"
version = "0.1.0"
description = "Streams live exchange ticker data, computes price and mid-price EMAs and records them to CSV."
requires-python = ">=3.10"
keywords = ["ticker", "websocket", "ema", "market-data", "csv"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Financial and Insurance Industry",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
]
dependencies = [
    "websocket-client",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tickerfeed = "tickerfeed.app:main"

[tool.hatch.build.targets.wheel]
packages = ["tickerfeed"]

[tool.pytest.ini_options]
addopts = "-ra"
