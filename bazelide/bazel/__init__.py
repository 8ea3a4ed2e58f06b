"""Bazel process integration."""

from .runner import BazelError, BazelRunner, CommandOutput

__all__ = ["BazelError", "BazelRunner", "CommandOutput"]
