from .role import Role
from .user import User
from .staff import Staff
from .daily_sale import DailySale

__all__ = [
    'Role',
    'User',
    'Staff',
    'DailySale'
]
