[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stackkube"
version = "0.1.0"
description = "Stack resource model, state diffing, validation and subresource logic for compose stacks on Kubernetes"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "compose", "stack", "reconciliation", "diff", "validation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Clustering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["stackkube"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
