"""Shared utilities used across the API."""
