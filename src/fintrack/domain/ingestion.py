"""SMS ingestion domain service.

Takes inbound ``(sender, body)`` pairs from an SMS listener and turns the
accepted ones into pending transactions awaiting user confirmation. Each
message is handled to completion before the next one:

1. drop messages from senders outside the allow-list;
2. parse the body (non-transaction messages are ignored);
3. match the account by the last 4 digits in the message;
4. drop duplicates of confirmed or pending entries;
5. store the draft as pending and send one notification for it.
"""

import logging
from datetime import date
from typing import Iterable, Optional

from fintrack.config import DEFAULT_SMS_SENDERS
from fintrack.domain.account import AccountService
from fintrack.domain.category import SMS_AUTO_CATEGORY
from fintrack.domain.entities import Notification, Transaction, TransactionType
from fintrack.domain.notifications import LoggingNotifier, Notifier
from fintrack.domain.sms_parser import SmsTransactionParser
from fintrack.domain.store import ADD_PENDING_TRANSACTION, Action, TransactionStore
from fintrack.domain.transaction import is_duplicate
from fintrack.utils.ids import new_id

logger = logging.getLogger(__name__)


def is_allowed_sender(sender: str, allowed_senders: Iterable[str]) -> bool:
    """Case-insensitive substring match of the sender against the allow-list."""
    if not sender:
        return False
    upper = sender.upper()
    return any(token.upper() in upper for token in allowed_senders if token)


class SmsIngestionService:
    """Service turning bank SMS messages into pending transactions."""

    def __init__(
        self,
        store: TransactionStore,
        notifier: Optional[Notifier] = None,
        allowed_senders: Optional[Iterable[str]] = None,
        parser: Optional[SmsTransactionParser] = None,
    ):
        """Initialize SMS ingestion service.

        Args:
            store: TransactionStore instance
            notifier: Sink for "new pending transaction" notifications (defaults to
                LoggingNotifier)
            allowed_senders: Sender substrings to accept (defaults to bank tokens)
            parser: SMS parser (defaults to SmsTransactionParser)
        """
        self.store = store
        self.accounts = AccountService(store)
        self.notifier = notifier if notifier is not None else LoggingNotifier()
        self.allowed_senders = tuple(
            allowed_senders if allowed_senders is not None else DEFAULT_SMS_SENDERS
        )
        self.parser = parser or SmsTransactionParser()

    def ingest(self, sender: str, body: str, received_on: Optional[date] = None) -> Optional[Transaction]:
        """Process one inbound SMS.

        Args:
            sender: SMS sender address
            body: SMS text
            received_on: Date the message was processed, used when the body
                carries no date (defaults to today)

        Returns:
            The new pending transaction, or None if the message was ignored
        """
        if not is_allowed_sender(sender, self.allowed_senders):
            logger.debug("Ignoring SMS from sender %s", sender)
            return None

        parsed = self.parser.parse(sender, body, today=received_on)
        if parsed is None:
            logger.debug("SMS from %s is not a transaction", sender)
            return None

        account = self.accounts.find_by_last4(parsed.last4_digits)
        candidate = parsed.to_transaction(
            transaction_id=new_id(),
            account_id=account.id if account else None,
            category=SMS_AUTO_CATEGORY,
            original_sms=body,
        )

        state = self.store.state
        if is_duplicate(candidate, state.transactions + state.pending_transactions):
            logger.debug("Skipping duplicate SMS transaction: %s", candidate.note)
            return None

        self.store.dispatch(Action(ADD_PENDING_TRANSACTION, candidate))
        logger.info(
            "New pending %s of %s from %s", candidate.type.value, candidate.amount, sender
        )
        self.notifier.notify(self._notification_for(candidate))
        return candidate

    def _notification_for(self, txn: Transaction) -> Notification:
        direction = "Credit" if txn.type == TransactionType.INCOME else "Debit"
        card = f" on XX{txn.last4_digits}" if txn.last4_digits else ""
        return Notification(
            title=f"New {direction} Detected",
            body=f"₹{txn.amount} at {txn.merchant_name}{card}. Tap to confirm.",
            data={"transactionId": txn.id},
        )
