"""Shared domain primitives (time, exceptions)."""
