"""User and lead services."""

from .leads import ILeadService, LeadService
from .users import IThreadStore, IUserService, UserService

__all__ = [
    "IThreadStore",
    "IUserService",
    "UserService",
    "ILeadService",
    "LeadService",
]
