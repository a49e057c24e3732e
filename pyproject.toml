[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hshrink"
version = "0.1.0"
description = "Streaming LZSS compression for low-memory systems"
requires-python = ">=3.10"
dependencies = []
keywords = ["compression", "lzss", "heatshrink", "embedded", "streaming"]
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
    "Topic :: System :: Archiving :: Compression",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[project.scripts]
hshrink = "hshrink.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["hshrink"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
