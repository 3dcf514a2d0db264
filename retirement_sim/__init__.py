"""Retirement projection engine and its HTTP API."""
