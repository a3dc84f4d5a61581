"""IAM helpers and permission descriptors for the snapshot export."""

from . import utils  # noqa: F401
from .export_permissions import (
    EXPORT_SERVICE_PRINCIPAL,
    GrantStatement,
    PermissionBoundary,
    build_permission_boundary,
    export_role_grants,
    exporter_grants,
)

__all__ = [
    "utils",
    "EXPORT_SERVICE_PRINCIPAL",
    "GrantStatement",
    "PermissionBoundary",
    "build_permission_boundary",
    "export_role_grants",
    "exporter_grants",
]
