"""
Known-entity registries.

Provides:
- BankRegistry: bank code → bank name
- BeneficiaryMemory: beneficiary code → operator-given name
"""

from .banks import INITIAL_BANKS, BankEntry, BankRegistry, RegistrationResult
from .beneficiaries import BeneficiaryEntry, BeneficiaryMemory

__all__ = [
    "BankRegistry",
    "BankEntry",
    "BeneficiaryMemory",
    "BeneficiaryEntry",
    "RegistrationResult",
    "INITIAL_BANKS",
]
