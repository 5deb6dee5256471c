"""
Pydantic schemas for the local ledger's chart of accounts.

These define the API contract. They are separate from the
database models because the API shape and the storage shape
are often different.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# --- Request Schemas ---

class LedgerAccountCreate(BaseModel):
    """Request to create a new ledger account."""
    code: str = Field(min_length=4, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    is_active: bool = True


# --- Response Schemas ---

class LedgerAccountResponse(BaseModel):
    """Ledger account in API responses."""
    id: int
    code: str
    name: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class AccountBalanceResponse(BaseModel):
    """Response for an account balance query, in minor units."""
    account_code: str
    balance: int
    currency: str
