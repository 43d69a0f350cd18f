"""Shared utilities for tailorloop."""
