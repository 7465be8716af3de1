[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "capoa"
version = "0.1.0"
description = "Reconcilers, resource types and Ignition helpers for installing OpenShift clusters with the assisted installer in the Cluster API style"
requires-python = ">=3.10"
dependencies = []
keywords = ["openshift", "cluster-api", "assisted-installer", "ignition", "kubernetes"]
classifiers = [
    "Development Status :: 3 - Alpha",
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
packages = ["capoa"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
