"""Paystack REST adapter: charge initialize/verify and bank account resolution."""
import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from spotix_api.core.errors import BadRequest, ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

# Display name -> Paystack bank code
BANK_CODES: Dict[str, str] = {
    # Traditional banks
    "Access Bank": "044",
    "Citibank": "023",
    "Ecobank Nigeria": "050",
    "Fidelity Bank": "070",
    "First Bank of Nigeria": "011",
    "First City Monument Bank": "214",
    "FCMB": "214",
    "Globus Bank": "00103",
    "Guaranty Trust Bank": "058",
    "GTBank": "058",
    "GT Bank": "058",
    "Heritage Bank": "030",
    "Jaiz Bank": "301",
    "Keystone Bank": "082",
    "Lotus Bank": "303",
    "Parallex Bank": "526",
    "Polaris Bank": "076",
    "Providus Bank": "101",
    "Stanbic IBTC Bank": "221",
    "Stanbic IBTC": "221",
    "Standard Chartered Bank": "068",
    "Sterling Bank": "232",
    "SunTrust Bank": "100",
    "Taj Bank": "302",
    "Titan Trust Bank": "102",
    "Union Bank of Nigeria": "032",
    "Union Bank": "032",
    "United Bank For Africa": "033",
    "UBA": "033",
    "Unity Bank": "215",
    "Wema Bank": "035",
    "Zenith Bank": "057",
    # Digital banks & fintech
    "Opay": "999992",
    "OPay": "999992",
    "Palmpay": "999991",
    "PalmPay": "999991",
    "Moniepoint MFB": "50515",
    "Moniepoint": "50515",
    "Kuda Bank": "50211",
    "Kuda": "50211",
    "VFD Microfinance Bank": "566",
    "VFD MFB": "566",
    # Microfinance, mortgage and merchant banks
    "Rubies MFB": "125",
    "Sparkle Microfinance Bank": "51310",
    "Infinity MFB": "50457",
    "Aso Savings and Loans": "401",
    "Covenant MFB": "551",
    "Ekondo Microfinance Bank": "562",
    "Eyowo": "50126",
    "Hasal Microfinance Bank": "50383",
    "NPF MicroFinance Bank": "552",
    "Paga": "100002",
    "FSDH Merchant Bank Limited": "501",
    "Rand Merchant Bank": "502",
    "Nova Merchant Bank": "060",
    "9mobile 9Payment Service Bank": "120001",
    "Abbey Mortgage Bank": "404",
    "Lagos Building Investment Company Plc.": "90052",
    "Mutual Trust Microfinance Bank": "090129",
    "Petra Mircofinance Bank Plc": "50746",
    "Signature Bank Ltd": "50453",
    "TCF MFB": "51211",
}

_BANK_CODES_FOLDED = {" ".join(name.split()).casefold(): code for name, code in BANK_CODES.items()}


def resolve_bank_code(bank_name: str) -> Optional[str]:
    """Exact display name first, then a case and whitespace insensitive match."""
    code = BANK_CODES.get(bank_name)
    if code is None:
        code = _BANK_CODES_FOLDED.get(" ".join(bank_name.split()).casefold())
    return code


class PaystackClient:
    def __init__(self, secret_key: Optional[str], base_url: str = "https://api.paystack.co", timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.secret_key:
            logger.error("PAYSTACK_SECRET_KEY not configured")
            raise ConfigurationError("Payment gateway is not configured. Please contact support.")
        return {"Authorization": f"Bearer {self.secret_key}", "Content-Type": "application/json"}

    async def _request(self, method: str, path: str, failure: str, **kwargs: Any) -> httpx.Response:
        headers = self._headers()
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
                return await client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.exception("Paystack %s %s failed", method, path)
            raise UpstreamError(failure, details=str(exc)) from exc

    @staticmethod
    def _json(resp: httpx.Response, failure: str) -> Dict[str, Any]:
        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamError(failure, details=f"Gateway returned non-JSON response ({resp.status_code})") from exc
        if not isinstance(data, dict):
            raise UpstreamError(failure, details="Unexpected gateway response")
        return data

    def _relay(self, resp: httpx.Response, failure: str) -> Dict[str, Any]:
        data = self._json(resp, failure)
        if resp.is_success:
            return data
        message = data.get("message") or failure
        if 400 <= resp.status_code < 500:
            raise BadRequest(message, gateway_status=resp.status_code)
        raise UpstreamError(failure, details=message)

    async def initialize_transaction(self, email: str, amount: float, metadata: Any = None, callback_url: Optional[str] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "email": email,
            # Paystack works in the smallest currency unit (kobo)
            "amount": int(round(amount * 100)),
            "metadata": metadata,
        }
        if callback_url:
            payload["callback_url"] = callback_url
        failure = "Failed to initialize payment"
        resp = await self._request("POST", "/transaction/initialize", failure, json=payload)
        return self._relay(resp, failure)

    async def verify_transaction(self, reference: str) -> Dict[str, Any]:
        failure = "Failed to verify payment"
        resp = await self._request("GET", f"/transaction/verify/{quote(reference, safe='')}", failure)
        return self._relay(resp, failure)

    async def resolve_account(self, account_number: str, bank_code: str) -> Dict[str, Any]:
        """Return ``{account_name, account_number}`` or raise BadRequest if Paystack cannot match it."""
        failure = "Failed to verify account. Please try again later."
        resp = await self._request(
            "GET", "/bank/resolve", failure,
            params={"account_number": account_number, "bank_code": bank_code},
        )
        data = self._json(resp, failure)
        if resp.status_code >= 500:
            raise UpstreamError(failure, status=False)
        details = data.get("data") or {}
        if data.get("status") is True and details.get("account_name"):
            return {"account_name": details["account_name"], "account_number": details.get("account_number", account_number)}
        raise BadRequest(
            data.get("message") or "Unable to verify account. Please check the account number and try again.",
            status=False,
        )
