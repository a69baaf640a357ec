[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tradeclient"
version = "0.1.0"
description = "Trading client core: order books, market data gap recovery, features, positions, pre-trade risk and market-making / liquidity-taking strategies"
requires-python = ">=3.10"
keywords = [
    "trading",
    "order book",
    "market making",
    "market data",
    "risk management",
    "electronic trading",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
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
    "sortedcontainers",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tradeclient = "tradeclient.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tradeclient"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
