from typing import Optional

from fastapi import APIRouter, Depends, Query

from spotix_api.api.deps import get_paystack
from spotix_api.api.health import health_payload
from spotix_api.core.errors import BadRequest
from spotix_api.services.paystack import PaystackClient, resolve_bank_code

router = APIRouter()

@router.get("")
async def verify_account(
    account_number: Optional[str] = Query(None, alias="accountNumber"),
    bank_name: Optional[str] = Query(None, alias="bankName"),
    paystack: PaystackClient = Depends(get_paystack),
):
    """Resolve the account holder's name for a payout account."""
    if not account_number or not bank_name:
        raise BadRequest("Account number and bank name are required", status=False)
    bank_code = resolve_bank_code(bank_name)
    if not bank_code:
        raise BadRequest(f'Bank "{bank_name}" is not supported. Please select a valid bank from the list.', status=False)
    account = await paystack.resolve_account(account_number.strip(), bank_code)
    return {"status": True, **account, "bank_code": bank_code}

@router.get("/health")
def bank_health():
    return health_payload("Bank Account Verification API")
