"""MedCenter: multi-tenant medical records backend.

The service records business-critical actions into an asynchronous,
non-blocking action log and gates access to the resulting audit trail
with claims-based authorization policies.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
