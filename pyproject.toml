[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tidbus"
version = "0.1.0"
description = "Render upcoming bus departures as an animated WebP and push it to a Tidbyt display"
requires-python = ">=3.10"
keywords = ["tidbyt", "bus", "siri", "webp", "led-matrix", "departures", "bdf"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
]
dependencies = [
    "requests>=2.28",
    "pillow>=9.0",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[project.scripts]
tidbus = "tidbus.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["tidbus"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
