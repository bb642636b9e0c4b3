# walletstore/core/address_store.py
"""
Address Store

Keeps the wallet's view of every address it has seen, split into addresses
the wallet owns and third-party addresses it has paid. Raw subscription
payloads from the wallet backend are classified by transaction category and
merged into per-address transaction lists; redelivered or reordered
transactions replace earlier copies by id so the store converges on the same
state regardless of delivery order.
"""

import threading
from enum import Enum
from typing import Any, Dict, List, Optional

from walletstore.config import get_missing_category_policy
from walletstore.core import types
from walletstore.core.last_seen import LastSeenTracker
from walletstore.core.records import (
    PRIVATE_OR_MINED,
    AddressPartition,
    AddressRecord,
    Category,
    TransactionRecord,
    extract_tx_basics,
    transaction_view,
)
from walletstore.utils.console import print_debug, print_error, print_warn
from walletstore.utils.validation import is_valid_address_key, sanitize_label


class MissingCategoryPolicy(Enum):
    """What to do with a transaction that arrives without a category"""
    ABORT_BATCH = "abort_batch"
    SKIP_TRANSACTION = "skip_transaction"

    @classmethod
    def from_env(cls) -> "MissingCategoryPolicy":
        value = get_missing_category_policy()
        for policy in cls:
            if policy.value == value:
                return policy
        print_warn(f"⚠️  Unknown missing-category policy '{value}', using abort_batch")
        return cls.ABORT_BATCH


# Category -> (partition to ensure, handler method). Mint touches no partition.
_CATEGORY_HANDLERS = {
    Category.RECEIVE: (AddressPartition.WALLET, "_add_receive"),
    Category.SPEND_IN: (AddressPartition.WALLET, "_add_spend_in"),
    Category.SEND: (AddressPartition.THIRD_PARTY, "_add_send"),
    Category.SPEND_OUT: (AddressPartition.THIRD_PARTY, "_add_spend_out"),
    Category.MINT: (None, "_add_mint"),
    Category.MINED: (AddressPartition.WALLET, "_add_mined"),
}

_unhandled = set(Category) - set(_CATEGORY_HANDLERS)
if _unhandled:
    raise RuntimeError(f"No handler for categories: {sorted(c.value for c in _unhandled)}")


class AddressStore:
    """
    Owns the wallet and third-party address partitions.

    Only the store's own methods mutate the partitions. Every query method
    returns freshly built dicts, so callers can never alter stored records.
    """

    def __init__(self,
                 blockchain=None,
                 bus=None,
                 last_seen: Optional[LastSeenTracker] = None,
                 missing_category_policy: Optional[MissingCategoryPolicy] = None):
        self.blockchain = blockchain
        self.bus = bus
        self.last_seen = last_seen or LastSeenTracker("transaction")
        self.missing_category_policy = missing_category_policy or MissingCategoryPolicy.from_env()
        self.state_lock = threading.RLock()
        self._partitions: Dict[AddressPartition, Dict[str, AddressRecord]] = {
            AddressPartition.WALLET: {},
            AddressPartition.THIRD_PARTY: {},
        }

    @property
    def current_block_height(self) -> Optional[int]:
        if self.blockchain is None:
            return None
        return self.blockchain.current_block_height

    def bind(self, bus) -> None:
        """Subscribe the store's inbound handlers on ``bus``"""
        self.bus = bus
        bus.subscribe(types.ON_ADDRESS_SUBSCRIPTION, self.on_address_subscription)
        bus.subscribe(types.ON_TRANSACTION_SUBSCRIPTION, self.on_transaction_subscription)
        bus.subscribe(types.UPDATE_TX_LABEL, self.on_update_tx_label)

    def _emit(self, event: str, payload: Any) -> None:
        if self.bus is None:
            print_debug(f"No event bus attached, dropping {event}")
            return
        self.bus.dispatch(event, payload)

    # =========================================================================
    # Subscriptions
    # =========================================================================

    @staticmethod
    def _normalize_payload(data: Any) -> Optional[Dict]:
        if not isinstance(data, dict):
            return None
        if data.get("addresses"):
            return data
        return {"addresses": data}

    def on_address_subscription(self, data: Any) -> Optional[Dict]:
        """Handle an address push. Never raises."""
        return self._handle_subscription("address", data)

    def on_transaction_subscription(self, data: Any) -> Optional[Dict]:
        """Handle a transaction push. Never raises."""
        return self._handle_subscription("transaction", data)

    def _handle_subscription(self, source: str, data: Any) -> Optional[Dict]:
        try:
            payload = self._normalize_payload(data)
            if payload is None:
                print_warn(f"⚠️  Ignoring malformed {source} subscription payload: {data!r}")
                return None
            return self.ingest_address_snapshot(payload["addresses"])
        except Exception as e:
            print_error(f"❌ {source.capitalize()} subscription error: {e}")
            print_debug(data)
            return None

    # =========================================================================
    # Ingest
    # =========================================================================

    def ingest_address_snapshot(self, snapshot: Dict) -> Dict:
        """
        Merge an address snapshot into the store.

        ``snapshot`` maps address -> ``{"txids": {index: {txid: raw_tx}}, "total": ...}``.

        Returns a summary: addresses visited, transactions applied, items
        skipped and whether the batch was aborted on a missing category.
        """
        result = {"addresses": 0, "transactions": 0, "skipped": 0, "aborted": False}
        if not isinstance(snapshot, dict):
            raise ValueError("Address snapshot must be a mapping")

        with self.state_lock:
            for address_key, entry in snapshot.items():
                if not entry:
                    continue

                if not is_valid_address_key(address_key):
                    print_warn(f"⚠️  Skipping invalid address key {address_key!r}")
                    result["skipped"] += 1
                    continue

                txids = entry.get("txids") if isinstance(entry, dict) else None
                if not txids:
                    print_warn(f"⚠️  No txids found for address {address_key}")
                    result["skipped"] += 1
                    continue
                if not isinstance(txids, dict):
                    print_warn(f"⚠️  Malformed txids for address {address_key}: {txids!r}")
                    result["skipped"] += 1
                    continue

                result["addresses"] += 1
                total = entry.get("total")

                for output_index, outputs in txids.items():
                    if not outputs:
                        continue
                    if not isinstance(outputs, dict):
                        print_warn(f"⚠️  Malformed outputs {output_index!r} for address {address_key}: {outputs!r}")
                        result["skipped"] += 1
                        continue
                    for raw_tx in outputs.values():
                        outcome = self._ingest_transaction(address_key, raw_tx, total)
                        if outcome is None:
                            print_warn(f"⚠️  Transaction without category for {address_key}: {raw_tx!r}")
                            if self.missing_category_policy is MissingCategoryPolicy.ABORT_BATCH:
                                result["aborted"] = True
                                return result
                            result["skipped"] += 1
                        elif outcome:
                            result["transactions"] += 1
                        else:
                            result["skipped"] += 1

        return result

    def _ingest_transaction(self, address_key: str, raw_tx: Any, total: Any) -> Optional[bool]:
        """
        Classify and apply one raw transaction.

        Returns None when the category is missing, False when the transaction
        was skipped and True when it was applied.
        """
        if not isinstance(raw_tx, dict) or not raw_tx.get("category"):
            return None

        category = Category.parse(raw_tx["category"])
        if category is None:
            print_warn(f"⚠️  Unhandled address category {raw_tx['category']!r}: {raw_tx.get('txid')}")
            return False

        # Built before any partition is touched
        basics = extract_tx_basics(raw_tx, category)

        partition, handler_name = _CATEGORY_HANDLERS[category]
        if partition is not None:
            self._ensure_address(partition, address_key, total)

        target = raw_tx.get("address") or address_key
        getattr(self, handler_name)(target, raw_tx, basics)
        return True

    def _ensure_address(self, partition: AddressPartition, address: str, total: Any) -> bool:
        """Create the address record once; later totals never overwrite it."""
        collection = self._partitions[partition]
        if address in collection:
            return False
        print_debug(f"📱 Adding {partition.value} address {address} (total: {total})")
        collection[address] = AddressRecord(address=address, total=total)
        return True

    def _add_transaction(self, partition: AddressPartition, address: str, transaction: TransactionRecord) -> None:
        collection = self._partitions[partition]
        if address not in collection:
            print_warn(f"⚠️  Transaction {transaction.id} targets untracked address {address}, adding it")
            collection[address] = AddressRecord(address=address)
        replaced = collection[address].upsert(transaction)
        if replaced:
            print_debug(f"🔁 Replaced {transaction.id} on {address}")

    # =========================================================================
    # Category handlers
    # =========================================================================

    def _add_receive(self, address: str, raw_tx: Dict, basics: Dict) -> None:
        self._add_transaction(AddressPartition.WALLET, address, TransactionRecord(**basics))

    def _add_mined(self, address: str, raw_tx: Dict, basics: Dict) -> None:
        self._add_transaction(AddressPartition.WALLET, address, TransactionRecord(**basics))

    def _add_spend_in(self, address: str, raw_tx: Dict, basics: Dict) -> None:
        basics["is_private"] = True
        self._add_transaction(AddressPartition.WALLET, address, TransactionRecord(**basics))

    def _add_send(self, address: str, raw_tx: Dict, basics: Dict) -> None:
        basics["fee"] = raw_tx.get("fee")
        basics["label"] = raw_tx.get("label")
        self._add_transaction(AddressPartition.THIRD_PARTY, address, TransactionRecord(**basics))

    def _add_spend_out(self, address: str, raw_tx: Dict, basics: Dict) -> None:
        basics["label"] = raw_tx.get("label")
        basics["is_private"] = True
        self._add_transaction(AddressPartition.THIRD_PARTY, address, TransactionRecord(**basics))

    def _add_mint(self, address: str, raw_tx: Dict, basics: Dict) -> None:
        if basics["block"] is not None:
            basics["block"] = basics["block"].to_dict()
        basics["fee"] = raw_tx.get("fee")
        basics["used"] = raw_tx.get("used")
        self._emit(types.UPDATE_MINT, basics)

    # =========================================================================
    # Labels
    # =========================================================================

    def on_update_tx_label(self, payload: Any) -> bool:
        if not isinstance(payload, dict):
            return False
        return self.record_label(payload.get("id"), payload.get("label"))

    def record_label(self, tx_id: str, label: Optional[str]) -> bool:
        """
        Set the label of an outgoing transaction identified by composite id.

        Returns False without touching anything when the id is unknown or the
        label is unchanged.
        """
        if label is not None:
            label = sanitize_label(label)

        with self.state_lock:
            owner, tx = self._find_outgoing(tx_id)
            if tx is None or tx.label == label:
                return False
            tx.label = label

        self._emit(types.TX_LABEL_UPDATED, {
            "id": tx.id,
            "address": owner,
            "txid": tx.txid,
            "label": label,
        })
        return True

    def _find_outgoing(self, tx_id: str):
        for address, record in self._partitions[AddressPartition.THIRD_PARTY].items():
            tx = record.find(tx_id)
            if tx is not None:
                return address, tx
        return None, None

    # =========================================================================
    # Query methods
    # =========================================================================

    def wallet_addresses(self) -> List[Dict]:
        """
        Wallet-owned addresses with confirmations attached, transactions sorted
        oldest first, and reuse/confirmation flags.
        """
        height = self.current_block_height
        with self.state_lock:
            records = list(self._partitions[AddressPartition.WALLET].values())
            views = []
            for record in records:
                txs = [transaction_view(tx, height) for tx in record.transactions]
                txs.sort(key=lambda tx: tx["first_seen_at"] or 0)

                confirmations = max((tx["confirmations"] for tx in txs), default=0)
                public_txs = [tx for tx in txs if tx["category"] not in PRIVATE_OR_MINED]

                views.append({
                    "address": record.address,
                    "total": record.total,
                    "transactions": txs,
                    "has_transactions": bool(txs),
                    "is_reused": len(public_txs) > 1,
                    "is_confirmed": confirmations >= 1,
                    "confirmations": confirmations,
                })
            return views

    def get_amount_received_via_address(self, address: str) -> Any:
        """Stored balance for a wallet address, or -1 if it has never been seen"""
        with self.state_lock:
            record = self._partitions[AddressPartition.WALLET].get(address)
            if record is None:
                return -1
            total = record.total
        if isinstance(total, dict):
            return total.get("balance")
        return total

    def third_party_addresses(self) -> List[Dict]:
        with self.state_lock:
            return [record.to_dict() for record in self._partitions[AddressPartition.THIRD_PARTY].values()]

    def has_already_sent_to_address(self, address: str) -> bool:
        with self.state_lock:
            record = self._partitions[AddressPartition.THIRD_PARTY].get(address)
            return bool(record and record.transactions)

    def get_first_payment_to_address(self, address: str) -> Optional[Dict]:
        """The first transaction recorded to ``address`` (insertion order, not time)"""
        height = self.current_block_height
        with self.state_lock:
            if not self.has_already_sent_to_address(address):
                return None
            first = self._partitions[AddressPartition.THIRD_PARTY][address].transactions[0]
            return transaction_view(first, height)

    def get_outgoing_transactions(self) -> List[Dict]:
        height = self.current_block_height
        with self.state_lock:
            result = []
            for address, record in self._partitions[AddressPartition.THIRD_PARTY].items():
                result.extend(transaction_view(tx, height, belongs_to_address=address)
                              for tx in record.transactions)
            return result

    def get_outgoing_transaction_by_id(self, tx_id: str) -> Optional[Dict]:
        for tx in self.get_outgoing_transactions():
            if tx["id"] == tx_id:
                return tx
        return None

    def get_unseen_transactions(self) -> List[Dict]:
        """Wallet transactions first seen after the last-seen mark"""
        unseen = []
        for address in self.wallet_addresses():
            for tx in address["transactions"]:
                if self.last_seen.is_unseen(tx["first_seen_at"]):
                    tx["belongs_to_address"] = address["address"]
                    unseen.append(tx)
        return unseen

    def mark_transactions_seen(self, at: Optional[int] = None) -> int:
        return self.last_seen.mark_seen(at)

    # =========================================================================
    # Utility methods
    # =========================================================================

    def get_partition_of(self, address: str) -> Optional[AddressPartition]:
        with self.state_lock:
            for partition, collection in self._partitions.items():
                if address in collection:
                    return partition
            return None

    def get_summary(self) -> Dict:
        with self.state_lock:
            wallet = self._partitions[AddressPartition.WALLET]
            third_party = self._partitions[AddressPartition.THIRD_PARTY]
            return {
                "wallet_addresses": len(wallet),
                "third_party_addresses": len(third_party),
                "wallet_transactions": sum(len(r.transactions) for r in wallet.values()),
                "outgoing_transactions": sum(len(r.transactions) for r in third_party.values()),
                "current_block_height": self.current_block_height,
                "last_seen": self.last_seen.to_dict(),
            }

    def to_dict(self) -> Dict:
        """Full copy of both partitions"""
        with self.state_lock:
            return {
                partition.value: {addr: record.to_dict() for addr, record in collection.items()}
                for partition, collection in self._partitions.items()
            }
