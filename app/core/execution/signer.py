"""Local signing of relay transactions with eth-account."""

from eth_account import Account
from eth_utils import to_hex

from .errors import SigningError
from .models import ControlledAccount, PendingOperation, SignedTransaction


class TransactionSigner:
    """Signs pending operations with the controlled account's key."""

    def __init__(self, account: ControlledAccount):
        self.account = account
        self._local = Account.from_key(account.private_key)

    def sign(self, operation: PendingOperation) -> SignedTransaction:
        if operation.nonce is None:
            raise SigningError("Refusing to sign an operation without a nonce")
        if operation.chain_id != self.account.chain_id:
            raise SigningError(
                f"Operation targets chain {operation.chain_id}, "
                f"account is bound to {self.account.chain_id}"
            )

        try:
            signed = self._local.sign_transaction(operation.to_dict())
        except (TypeError, ValueError) as e:
            raise SigningError(f"Failed to sign transaction: {e}", nonce=operation.nonce) from e

        return SignedTransaction(
            operation=operation,
            raw_transaction=to_hex(signed.raw_transaction),
            tx_hash=to_hex(signed.hash),
        )
