"""Logging setup for mlcli."""
