[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voxelmap"
version = "0.1.0"
description = "Voxel map utilities: marching-cubes meshing, mesh layers, camera frusta, simulated depth sensing, voxel evaluation and message framing"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["voxel", "tsdf", "esdf", "marching cubes", "mesh", "mapping", "simulation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["voxelmap"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
