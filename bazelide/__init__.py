"""Editor integration helpers for Bazel workspaces."""

__version__ = "0.4.0"
