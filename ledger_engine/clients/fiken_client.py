"""
Fiken API client.

Implements the ledger collaborator interface against Fiken API v2.
Responses are validated through the boundary schemas in
schemas/fiken.py before they reach the engine. Transport
failures, timeouts, rate limiting and 5xx responses raise
LedgerUnavailableError; other error responses raise
LedgerRejectedError with the ledger's own message.
"""

import logging
import re
from datetime import date

import httpx
from pydantic import ValidationError

from ledger_engine.clients.base import (
    LedgerError,
    LedgerRejectedError,
    LedgerUnavailableError,
)
from ledger_engine.config import Settings
from ledger_engine.engine_config import EngineConfig
from ledger_engine.schemas.fiken import (
    FikenBankAccount,
    FikenJournalEntry,
    posting_to_fiken,
)
from ledger_engine.schemas.posting import (
    LedgerEntrySnapshot,
    MonetaryAccount,
    Posting,
)
from ledger_engine.services.account_validator import AccountAddressValidator

logger = logging.getLogger(__name__)

PAGE_SIZE = 100
# Safety stop for pagination: at most 1100 entries per query
MAX_PAGES = 11

_HTML_BREAK = re.compile(r"<br\s*/?>", re.IGNORECASE)
_HTML_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def strip_html(text: str) -> str:
    """Fiken sometimes returns HTML fragments inside error messages."""
    text = _HTML_BREAK.sub(" ", text)
    text = _HTML_TAG.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"

    if isinstance(data, list):
        return "; ".join(
            strip_html(str(item.get("message", item))) if isinstance(item, dict)
            else strip_html(str(item))
            for item in data
        )
    if not isinstance(data, dict):
        return strip_html(str(data))

    message = strip_html(
        data.get("error_description")
        or data.get("message")
        or data.get("error")
        or "Unknown error from Fiken API"
    )
    field_errors = data.get("errors") or []
    if field_errors:
        details = "; ".join(
            f"'{e.get('field')}': {strip_html(str(e.get('message', '')))}"
            for e in field_errors
        )
        message += f". Field errors: {details}"
    return message


def _json(response: httpx.Response, what: str):
    try:
        return response.json()
    except ValueError as e:
        raise LedgerError(f"Fiken returned a non-JSON {what} response") from e


class FikenClient:
    """
    Ledger collaborator backed by the Fiken REST API.

    The httpx.Client can be injected, which is how tests swap
    in an httpx.MockTransport.
    """

    def __init__(
        self,
        access_token: str,
        company_slug: str,
        config: EngineConfig,
        base_url: str = "https://api.fiken.no/api/v2",
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ):
        if not company_slug:
            raise ValueError("company_slug is required")
        self.company_slug = company_slug
        self.config = config
        self.validator = AccountAddressValidator(config)
        self.http = http_client or httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
        )

    @classmethod
    def from_settings(cls, settings: Settings, config: EngineConfig) -> "FikenClient":
        return cls(
            access_token=settings.FIKEN_ACCESS_TOKEN,
            company_slug=settings.FIKEN_COMPANY_SLUG,
            config=config,
            base_url=settings.FIKEN_API_BASE,
            timeout=settings.FIKEN_TIMEOUT_SECONDS,
        )

    def close(self) -> None:
        self.http.close()

    def _company_path(self, path: str) -> str:
        return f"/companies/{self.company_slug}{path}"

    def _request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        json: dict | None = None,
    ) -> httpx.Response:
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}

        try:
            response = self.http.request(
                method, self._company_path(path), params=params, json=json
            )
        except httpx.TimeoutException as e:
            logger.warning("Fiken %s %s timed out", method, path)
            raise LedgerUnavailableError(f"Fiken API timed out: {e}") from e
        except httpx.RequestError as e:
            logger.warning("Fiken %s %s failed: %s", method, path, e)
            raise LedgerUnavailableError(f"Could not reach Fiken API: {e}") from e

        if response.status_code == 429:
            raise LedgerUnavailableError("Fiken API rate limit reached; try again shortly")

        if response.status_code >= 500:
            message = _error_message(response)
            logger.warning("Fiken %s %s returned %s: %s", method, path, response.status_code, message)
            raise LedgerUnavailableError(
                f"Fiken API error ({response.status_code}): {message}"
            )

        if response.status_code >= 400:
            message = _error_message(response)
            logger.error("Fiken %s %s returned %s: %s", method, path, response.status_code, message)
            raise LedgerRejectedError(
                f"Fiken API error ({response.status_code}): {message}"
            )

        return response

    def list_monetary_accounts(self) -> list[MonetaryAccount]:
        response = self._request("GET", "/bankAccounts")
        try:
            accounts = [
                FikenBankAccount.model_validate(item)
                for item in _json(response, "bank account")
            ]
        except (ValidationError, TypeError) as e:
            raise LedgerError(f"Unexpected bank account payload: {e}") from e
        return [account.to_monetary_account() for account in accounts]

    def query_recent_entries(
        self, date_from: date, date_to: date
    ) -> list[LedgerEntrySnapshot]:
        snapshots: list[LedgerEntrySnapshot] = []
        for page in range(MAX_PAGES):
            response = self._request("GET", "/journalEntries", params={
                "dateGe": date_from.isoformat(),
                "dateLe": date_to.isoformat(),
                "page": page,
                "pageSize": PAGE_SIZE,
            })
            items = _json(response, "journal entry")
            try:
                entries = [FikenJournalEntry.model_validate(item) for item in items]
            except (ValidationError, TypeError) as e:
                raise LedgerError(f"Unexpected journal entry payload: {e}") from e

            snapshots.extend(
                entry.to_snapshot(self.config.currency, self.validator.is_monetary)
                for entry in entries
            )
            if len(items) < PAGE_SIZE:
                break
        else:
            logger.warning(
                "Stopped paging journal entries after %d pages (%s to %s)",
                MAX_PAGES, date_from, date_to,
            )
        return snapshots

    def submit_posting(self, posting: Posting) -> str:
        """
        Create a general journal entry.

        The id comes from the response body when Fiken returns one,
        otherwise from the Location header. No id means we cannot
        tell the caller what was created, which is an error.
        """
        if posting.pending_lines:
            raise LedgerRejectedError("posting has lines without an account")

        response = self._request(
            "POST", "/generalJournalEntries", json=posting_to_fiken(posting)
        )

        posting_id = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("journalEntryId") is not None:
                posting_id = str(body["journalEntryId"])

        location = response.headers.get("Location")
        if posting_id is None and location:
            posting_id = location.rstrip("/").rsplit("/", 1)[-1]

        if not posting_id:
            raise LedgerError("Fiken created the entry but returned no identifier")

        logger.info("Submitted journal entry %s to Fiken", posting_id)
        return posting_id
