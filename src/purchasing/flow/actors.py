"""Who is running a purchase flow.

An actor is either a staff member working in the back office or an
authenticated customer. Callers dispatch with ``match``.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Staff:
    member_id: str


@dataclass(frozen=True)
class Customer:
    customer_id: str


Actor = Staff | Customer
