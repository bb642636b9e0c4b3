"""
Address and transaction records kept by the address store.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

from walletstore.utils.formatting import format_amount
from walletstore.utils.validation import parse_int


class Category(Enum):
    """Transaction categories reported by the wallet backend"""
    RECEIVE = "receive"
    SPEND_IN = "spendIn"
    SEND = "send"
    SPEND_OUT = "spendOut"
    MINT = "mint"
    MINED = "mined"

    @classmethod
    def parse(cls, value: Any) -> Optional["Category"]:
        """Match a raw category case-insensitively; None when unknown."""
        if value is None:
            return None
        return _CATEGORY_LOOKUP.get(str(value).strip().lower())


_CATEGORY_LOOKUP = {category.value.lower(): category for category in Category}

# Categories that do not count as externally visible receives
PRIVATE_OR_MINED = frozenset({Category.MINED.value, Category.SPEND_IN.value})


class AddressPartition(Enum):
    """Which of the two address collections a record lives in"""
    WALLET = "wallet"
    THIRD_PARTY = "third_party"


@dataclass
class Block:
    height: int
    hash: str
    time: Optional[int] = None  # epoch ms

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class TransactionRecord:
    """A single transaction output as stored against an address"""
    id: str
    txid: str
    index: int
    category: str
    amount: Optional[float] = None
    first_seen_at: Optional[int] = None
    block: Optional[Block] = None
    is_private: bool = False
    fee: Optional[float] = None
    label: Optional[str] = None

    def confirmations(self, current_block_height: Optional[int]) -> int:
        if self.block is None or current_block_height is None:
            return 0
        return max(0, current_block_height - self.block.height + 1)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["amount_display"] = format_amount(self.amount)
        return data


@dataclass
class AddressRecord:
    """An address in one partition together with its transactions"""
    address: str
    total: Any = None
    transactions: List[TransactionRecord] = field(default_factory=list)

    def find(self, tx_id: str) -> Optional[TransactionRecord]:
        for tx in self.transactions:
            if tx.id == tx_id:
                return tx
        return None

    def upsert(self, transaction: TransactionRecord) -> bool:
        """
        Replace any transaction with the same id and append the new one.
        Returns True when an existing entry was replaced.
        """
        before = len(self.transactions)
        self.transactions = [tx for tx in self.transactions if tx.id != transaction.id]
        replaced = len(self.transactions) != before
        self.transactions.append(transaction)
        return replaced

    def to_dict(self) -> Dict:
        return {
            "address": self.address,
            "total": self.total,
            "transactions": [tx.to_dict() for tx in self.transactions],
        }


def make_tx_id(txid: str, index: int) -> str:
    return f"{txid}-{index}"


def extract_tx_basics(raw_tx: Dict, category: Category) -> Dict:
    """
    Pull the fields every category shares out of a raw backend transaction.

    The block is only known when both height and hash are present; in that
    case ``first_seen_at`` is pulled back to the block time if the block is
    older, which happens for transactions first reported during initial sync.
    Numeric fields that cannot be parsed are treated as absent.
    """
    txid = raw_tx.get("txid")
    index = parse_int(raw_tx.get("txIndex"), 0) or 0
    first_seen_at = parse_int(raw_tx.get("firstSeenAt"))

    block = None
    block_height = parse_int(raw_tx.get("blockHeight"))
    block_hash = raw_tx.get("blockHash")
    if block_height and block_hash:
        block_time = parse_int(raw_tx.get("blockTime"))
        block = Block(
            height=block_height,
            hash=block_hash,
            time=block_time * 1000 if block_time is not None else None,
        )
        if block.time is not None:
            if first_seen_at is None or block.time < first_seen_at:
                first_seen_at = block.time

    return {
        "id": make_tx_id(txid, index),
        "txid": txid,
        "index": index,
        "category": category.value,
        "amount": raw_tx.get("amount"),
        "first_seen_at": first_seen_at,
        "block": block,
        "is_private": False,
    }


def transaction_view(tx: TransactionRecord, current_block_height: Optional[int],
                     belongs_to_address: Optional[str] = None) -> Dict:
    """Copy of a transaction with confirmations (and owner) attached"""
    data = tx.to_dict()
    data["confirmations"] = tx.confirmations(current_block_height)
    if belongs_to_address is not None:
        data["belongs_to_address"] = belongs_to_address
    return data
