"""Shared helpers for configuration parsing and naming rules."""
