"""
Role checks backed by the request identity
"""
from rest_framework.permissions import BasePermission

from apps.core.identity import identity_from_request


class HasIdentity(BasePermission):
    message = "Authentication required"

    def has_permission(self, request, view):
        return identity_from_request(request) is not None


class IsStoreAdmin(BasePermission):
    message = "Insufficient permissions"

    def has_permission(self, request, view):
        identity = identity_from_request(request)
        return identity is not None and identity.is_admin


class IsShopManager(BasePermission):
    message = "Insufficient permissions"

    def has_permission(self, request, view):
        identity = identity_from_request(request)
        return identity is not None and identity.is_manager
