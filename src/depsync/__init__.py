"""depsync — keep node_modules, package.json and the typings reference file in step."""

__version__ = "0.1.0"
