"""
Per-request identity supplied by the (external) authentication layer.
"""
from dataclasses import dataclass
from typing import Optional

STAFF_ROLES = ('admin', 'shop_manager', 'staff')
MANAGER_ROLES = ('admin', 'shop_manager')


@dataclass(frozen=True)
class Identity:
    """Who is calling: customer profile id, email and role."""
    id: Optional[str]
    email: str
    role: str = 'customer'

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES


def identity_from_user(user) -> Optional[Identity]:
    """
    Build an Identity from a Django auth user.

    The user's ``customer`` profile supplies id and role; a superuser without
    a profile acts as admin. Anonymous users have no identity.
    """
    if user is None or not user.is_authenticated:
        return None

    customer = getattr(user, 'customer', None)
    if customer is not None:
        return Identity(id=str(customer.id), email=customer.email, role=customer.role)

    role = 'admin' if user.is_superuser else 'customer'
    return Identity(id=None, email=user.email, role=role)


def identity_from_request(request) -> Optional[Identity]:
    return identity_from_user(getattr(request, 'user', None))
