"""Transaction domain service."""

from typing import Optional
from datetime import date

from tallybook.config import DEFAULT_MAX_RECEIPT_BYTES
from tallybook.database.base import Database
from tallybook.domain.entities import (
    DateRange,
    ReceiptUpload,
    Transaction as TransactionEntity,
    TransactionDraft,
    TransactionFilter,
    TransactionKind,
    TransactionPage,
)
from tallybook.domain.errors import (
    AttachmentError,
    NotFoundError,
    StoreError,
    ValidationError,
    category_kind_mismatch,
    reference_not_found,
    transaction_not_found,
)
from tallybook.domain.money import MAX_AMOUNT, MoneyPair
from tallybook.logging_setup import get_logger
from tallybook.storage.base import ObjectStore

logger = get_logger("tallybook.domain.transaction")


class TransactionService:
    """Service for managing one user's transactions and their receipts."""

    def __init__(
        self,
        db: Database,
        owner_id: str,
        store: Optional[ObjectStore] = None,
        max_receipt_bytes: int = DEFAULT_MAX_RECEIPT_BYTES,
    ):
        """Initialize transaction service.

        Args:
            db: Database instance
            owner_id: Identity of the user; every read and write is scoped by it
            store: Object store for receipts; required only for receipt operations
            max_receipt_bytes: Largest receipt accepted
        """
        self.db = db
        self.owner_id = owner_id
        self.store = store
        self.max_receipt_bytes = max_receipt_bytes

    def _require_store(self) -> ObjectStore:
        if self.store is None:
            raise AttachmentError("No receipt storage configured")
        return self.store

    def _validate_amount(self, amount: MoneyPair) -> MoneyPair:
        if not amount.is_non_negative():
            raise ValidationError(
                "Official and unofficial amounts must not be negative", field="amount"
            )
        for component in (amount.official, amount.unofficial):
            if component.as_tuple().exponent < -2:
                raise ValidationError(
                    f"Amount {component} has more than two decimal places", field="amount"
                )
            if abs(component) > MAX_AMOUNT:
                raise ValidationError(
                    f"Amount {component} exceeds the largest storable amount {MAX_AMOUNT}",
                    field="amount",
                )
        return amount.quantized()

    def _validate_receipt(self, receipt: ReceiptUpload) -> None:
        if not receipt.data:
            raise ValidationError("Receipt file is empty", field="receipt")
        if len(receipt.data) > self.max_receipt_bytes:
            raise ValidationError(
                f"Receipt is {len(receipt.data)} bytes; the limit is {self.max_receipt_bytes}",
                field="receipt",
            )

    def build_draft(
        self,
        kind: TransactionKind | str,
        amount: MoneyPair,
        occurred_on: date,
        description: Optional[str] = None,
        company_id: Optional[int] = None,
        counterparty_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> TransactionDraft:
        """Validate transaction fields against the owner's reference entities.

        Raises:
            ValidationError: On negative amounts, unknown references or a
                category of the other kind
        """
        kind = TransactionKind.parse(kind)
        amount = self._validate_amount(amount)

        if company_id is not None and self.db.get_company(self.owner_id, company_id) is None:
            raise ValidationError(reference_not_found("Company", company_id), field="company_id")

        if (
            counterparty_id is not None
            and self.db.get_counterparty(self.owner_id, counterparty_id) is None
        ):
            raise ValidationError(
                reference_not_found("Client", counterparty_id), field="counterparty_id"
            )

        if category_id is not None:
            category = self.db.get_category(self.owner_id, category_id)
            if category is None:
                raise ValidationError(
                    reference_not_found("Category", category_id), field="category_id"
                )
            if category.kind != kind:
                raise ValidationError(
                    category_kind_mismatch(category_id, category.kind.value, kind.value),
                    field="category_id",
                )

        if description is not None:
            description = description.strip() or None

        return TransactionDraft(
            kind=kind,
            amount=amount,
            occurred_on=occurred_on,
            description=description,
            company_id=company_id,
            counterparty_id=counterparty_id,
            category_id=category_id,
        )

    def create_transaction(
        self,
        kind: TransactionKind | str,
        amount: MoneyPair,
        occurred_on: date,
        description: Optional[str] = None,
        company_id: Optional[int] = None,
        counterparty_id: Optional[int] = None,
        category_id: Optional[int] = None,
        receipt: Optional[ReceiptUpload] = None,
    ) -> TransactionEntity:
        """Create a transaction.

        Args:
            kind: income or expense
            amount: Official and unofficial amounts, both non-negative
            occurred_on: Transaction date
            description: Optional description
            company_id: Optional company ID
            counterparty_id: Optional client/supplier ID
            category_id: Optional category ID; its kind must match
            receipt: Optional receipt image, uploaded before the insert

        Returns:
            The created transaction

        Raises:
            ValidationError: If any field is invalid
            AttachmentError: If the receipt upload fails
            StoreError: If the insert fails
        """
        draft = self.build_draft(
            kind, amount, occurred_on, description, company_id, counterparty_id, category_id
        )

        receipt_ref = None
        if receipt is not None:
            self._validate_receipt(receipt)
            receipt_ref = self._require_store().put(
                self.owner_id, receipt.data, receipt.content_type, receipt.filename
            )

        try:
            transaction_id = self.db.create_transaction(self.owner_id, draft, receipt_ref)
        except StoreError:
            if receipt_ref is not None:
                self._discard_object(receipt_ref)
            raise

        return self.require_transaction(transaction_id)

    def insert_draft(self, draft: TransactionDraft) -> TransactionEntity:
        """Insert an already validated draft without a receipt."""
        transaction_id = self.db.create_transaction(self.owner_id, draft)
        return self.require_transaction(transaction_id)

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found or owned by someone else
        """
        return self.db.get_transaction(self.owner_id, transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_transaction(self.owner_id, transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        window: Optional[DateRange] = None,
        filters: Optional[TransactionFilter] = None,
        page: int = 1,
        per_page: int = 20,
    ) -> TransactionPage:
        """List transactions, newest first, one page at a time.

        Raises:
            ValidationError: If page or per_page is below 1
        """
        if page < 1 or per_page < 1:
            raise ValidationError("page and per_page must be at least 1")

        total = self.db.count_transactions(self.owner_id, window, filters)
        items = self.db.list_transactions(
            self.owner_id, window, filters, offset=(page - 1) * per_page, limit=per_page
        )
        return TransactionPage(items=tuple(items), total=total, page=page, per_page=per_page)

    def all_transactions(
        self,
        window: Optional[DateRange] = None,
        filters: Optional[TransactionFilter] = None,
    ) -> list[TransactionEntity]:
        """Return every matching transaction, newest first."""
        return self.db.list_transactions(self.owner_id, window, filters)

    def update_transaction(
        self,
        transaction_id: int,
        kind: TransactionKind | str,
        amount: MoneyPair,
        occurred_on: date,
        description: Optional[str] = None,
        company_id: Optional[int] = None,
        counterparty_id: Optional[int] = None,
        category_id: Optional[int] = None,
    ) -> TransactionEntity:
        """Replace kind, amount, date, description and associations.

        Omitted associations are cleared. The receipt is left alone.

        Raises:
            NotFoundError: If the transaction does not exist
            ValidationError: If any field is invalid
        """
        self.require_transaction(transaction_id)
        draft = self.build_draft(
            kind, amount, occurred_on, description, company_id, counterparty_id, category_id
        )
        if not self.db.update_transaction(self.owner_id, transaction_id, draft):
            raise NotFoundError(transaction_not_found(transaction_id))
        return self.require_transaction(transaction_id)

    def replace_receipt(self, transaction_id: int, receipt: ReceiptUpload) -> TransactionEntity:
        """Attach a new receipt, removing the previous one afterwards.

        The new object is written first. The previous receipt is deleted only
        once the transaction points at the new one.

        Raises:
            NotFoundError: If the transaction does not exist
            ValidationError: If the receipt is empty or too large
            AttachmentError: If the upload fails (previous receipt untouched)
                or the previous receipt could not be removed afterwards
            StoreError: If the transaction could not be updated (the new
                object is removed again)
        """
        txn = self.require_transaction(transaction_id)
        self._validate_receipt(receipt)
        store = self._require_store()

        new_ref = store.put(self.owner_id, receipt.data, receipt.content_type, receipt.filename)

        try:
            updated = self.db.update_transaction_receipt(self.owner_id, transaction_id, new_ref)
        except StoreError:
            self._discard_object(new_ref)
            raise
        if not updated:
            self._discard_object(new_ref)
            raise NotFoundError(transaction_not_found(transaction_id))

        logger.info(
            "Replaced receipt of transaction %s: %s -> %s", transaction_id, txn.receipt_ref, new_ref
        )
        if txn.receipt_ref is not None:
            try:
                store.delete(txn.receipt_ref)
            except AttachmentError as e:
                raise AttachmentError(
                    f"Transaction {transaction_id} now uses the new receipt, but the previous "
                    f"receipt '{txn.receipt_ref}' could not be removed: {e}"
                ) from e

        return self.require_transaction(transaction_id)

    def receipt_url(self, transaction_id: int) -> Optional[str]:
        """Return the URL of the transaction's receipt, or None without one."""
        txn = self.require_transaction(transaction_id)
        if txn.receipt_ref is None:
            return None
        return self._require_store().get_url(txn.receipt_ref)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and its receipt.

        Args:
            transaction_id: Transaction ID to delete

        Raises:
            NotFoundError: If the transaction doesn't exist
            AttachmentError: If the row was deleted but its receipt was not
        """
        txn = self.require_transaction(transaction_id)

        if not self.db.delete_transaction(self.owner_id, transaction_id):
            raise NotFoundError(transaction_not_found(transaction_id))
        logger.info("Deleted transaction %s", transaction_id)

        if txn.receipt_ref is not None:
            try:
                self._require_store().delete(txn.receipt_ref)
            except AttachmentError as e:
                raise AttachmentError(
                    f"Transaction {transaction_id} was deleted, but its receipt "
                    f"'{txn.receipt_ref}' could not be removed: {e}"
                ) from e

    def _discard_object(self, handle: str) -> None:
        """Best-effort removal of an object that no transaction points to."""
        try:
            self._require_store().delete(handle)
        except AttachmentError as e:
            logger.warning("Could not remove orphaned receipt %s: %s", handle, e)
