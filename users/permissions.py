from rest_framework.permissions import BasePermission

from users.roles import Capability, has_capability


class HasCapability(BasePermission):
    capability = None
    message = "Forbidden: Admins only."

    def has_permission(self, request, view):
        identity = request.user
        return bool(
            identity
            and identity.is_authenticated
            and has_capability(identity.role, self.capability)
        )


class IsAdminRole(HasCapability):
    capability = Capability.MANAGE_CATALOG
