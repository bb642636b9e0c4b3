def make_tx(txid, category, amount=1.0, first_seen_at=1000, **extra):
    tx = {"txid": txid, "category": category, "amount": amount, "firstSeenAt": first_seen_at}
    tx.update(extra)
    return tx


def make_snapshot(address, *txs, total=None, index="0"):
    return {
        address: {
            "txids": {index: {tx["txid"]: tx for tx in txs}},
            "total": total if total is not None else {"balance": 0},
        }
    }
