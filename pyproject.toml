[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "imgraft"
version = "0.1.0"
description = "Image asset helpers: background removal, trimming, reference image loading, model alias resolution and a fixed JSON output contract."
requires-python = ">=3.10"
keywords = ["image", "background-removal", "png", "transparency", "generative", "assets"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
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
    "pillow",
    "httpx",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["imgraft"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
