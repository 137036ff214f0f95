"""Catalogue of common US home loan programmes.

Static reference information shown next to the calculator: benefits and
eligibility for VA, FHA, USDA, conventional and first-time homebuyer loans.

Public API
----------
LoanType        – One loan programme.
LOAN_TYPES      – Mapping of programme key → :class:`LoanType`.
get_loan_type   – Look up a programme by key.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LoanType:
    """A loan programme description.

    Attributes
    ----------
    key:
        Short identifier (e.g. ``"fha"``).
    name:
        Display name.
    benefits:
        Programme advantages.
    eligibility:
        Who qualifies.
    """

    key: str
    name: str
    benefits: tuple[str, ...]
    eligibility: tuple[str, ...]


LOAN_TYPES: dict[str, LoanType] = {
    "va": LoanType(
        key="va",
        name="VA Loans",
        benefits=(
            "No down payment required",
            "No private mortgage insurance (PMI)",
            "Competitive interest rates",
            "Easier qualification requirements",
        ),
        eligibility=(
            "Active-duty military, veterans, certain reservists, and National Guard members",
            "Surviving spouses (in some cases)",
        ),
    ),
    "fha": LoanType(
        key="fha",
        name="FHA Loans",
        benefits=(
            "Low down payment (as low as 3.5%)",
            "More flexible credit score requirements",
            "Can be used for first-time or repeat buyers",
        ),
        eligibility=(
            "Best for buyers with lower credit scores or limited savings for a down payment",
        ),
    ),
    "usda": LoanType(
        key="usda",
        name="USDA Loans",
        benefits=(
            "No down payment required",
            "Lower mortgage insurance costs",
            "Competitive interest rates",
        ),
        eligibility=(
            "Home must be in a designated rural or suburban area",
            "Income limits apply",
        ),
    ),
    "conventional": LoanType(
        key="conventional",
        name="Conventional Loans",
        benefits=(
            "Available from banks, credit unions, and mortgage lenders",
            "Can be used for primary homes, second homes, and investment properties",
        ),
        eligibility=(
            "Typically requires a higher credit score (620+)",
            "Minimum down payment: 3% for first-time homebuyers, 5-20% for others",
        ),
    ),
    "first_time": LoanType(
        key="first_time",
        name="First-Time Homebuyer Programs",
        benefits=(
            "Down payment assistance programs",
            "Tax credits",
            "Grants for homebuyers",
        ),
        eligibility=("Varies by state and program",),
    ),
}


def get_loan_type(key: str) -> LoanType:
    """Return the :class:`LoanType` registered under *key*.

    Raises
    ------
    KeyError
        If *key* is unknown; the message lists the available keys.
    """
    if key not in LOAN_TYPES:
        available = ", ".join(sorted(LOAN_TYPES))
        raise KeyError(f"Unknown loan type '{key}'. Available loan types: {available}")
    return LOAN_TYPES[key]
