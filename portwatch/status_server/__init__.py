"""Authenticated HTTP accessor for the status store."""

from portwatch.status_server.app import create_app, run_server
from portwatch.status_server.auth import SecretHeaderGuard, Unauthorized, secrets_match

__all__ = ["SecretHeaderGuard", "Unauthorized", "create_app", "run_server", "secrets_match"]
