"""Shared-secret access control for the REST API."""

from mlcli.auth.gate import AccessGate, AuthDecision

__all__ = ["AccessGate", "AuthDecision"]
