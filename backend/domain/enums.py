"""Closed vocabularies shared by the claim and account records."""
from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    MATING = "Mating"
    TP = "TP"
    JK = "JK"


class AllocationRole(str, Enum):
    WELDER = "WELDER"
    FOREMAN = "FOREMAN"


class ClaimStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class UserRole(str, Enum):
    GUEST = "GUEST"
    WORKER = "WORKER"
    ADMIN = "ADMIN"


class UserStatus(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REJECTED = "REJECTED"


class Workstation(str, Enum):
    """Yard codes that participate in sheet numbering."""

    Y1 = "Y1"
    Y2 = "Y2"
    Y3 = "Y3"
