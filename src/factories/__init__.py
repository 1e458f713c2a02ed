"""Dependency factories for clients and services."""
