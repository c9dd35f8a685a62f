"""portwatch: local TCP port-liveness monitor with an authenticated status endpoint."""

__version__ = "0.1.0"
