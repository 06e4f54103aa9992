from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """
    Portal administrators: role=admin, or Django staff/superuser.
    """
    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and user.is_portal_admin)


class IsPartner(BasePermission):
    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and user.role == "partner")


class IsPartnerOrAdmin(BasePermission):
    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and (user.role == "partner" or user.is_portal_admin))


class IsSupportOrAdmin(BasePermission):
    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and (user.role == "support" or user.is_portal_admin))
