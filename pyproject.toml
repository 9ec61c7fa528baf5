[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "microbmp"
version = "0.1.0"
description = "Row-wise BMP image reader with a small, bounded row cache"
requires-python = ">=3.10"
dependencies = []
keywords = ["bmp", "bitmap", "image", "decoder", "rgb565"]
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
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["microbmp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
