[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "peachos"
version = "0.1.0"
description = "Teaching-kernel building blocks in Python: a read-only FAT16 reader over disk images, path parsing, GDT/IDT encoding and a small user-space runtime."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "fat16",
    "filesystem",
    "disk-image",
    "gdt",
    "idt",
    "kernel",
    "education",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: System :: Operating System Kernels",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["peachos"]

[tool.hatch.build.targets.sdist]
include = ["peachos", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
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
