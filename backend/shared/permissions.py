from rest_framework.permissions import BasePermission

from .config import manager_groups


def is_manager(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser or user.is_staff:
        return True
    return user.groups.filter(name__in=manager_groups()).exists()


class IsManager(BasePermission):
    """
    Grants access to administrators and managers.

    A user counts as a manager when they are a superuser, staff, or a member
    of one of the groups listed in ``STOCKLINE["MANAGER_GROUPS"]``.
    """

    message = "Not authorized as a manager"

    def has_permission(self, request, view):
        return is_manager(request.user)
