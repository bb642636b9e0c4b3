# walletstore/cli.py
import argparse
import json
import sys

from . import __version__
from .config import apply_profile
from .core import types
from .client import WalletClient
from .core.address_store import MissingCategoryPolicy
from .utils.console import print_error, print_info, print_success
from .utils.formatting import format_amount, format_timestamp_ms


def _load_snapshot(path):
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def _print_wallet_addresses(client):
    views = client.addresses.wallet_addresses()
    print_info(f"Wallet addresses ({len(views)})")
    for view in views:
        flags = []
        if view["is_reused"]:
            flags.append("reused")
        if view["is_confirmed"]:
            flags.append("confirmed")
        print(f"  {view['address']}  received={format_amount(client.addresses.get_amount_received_via_address(view['address']))}"
              f"  confirmations={view['confirmations']}  {' '.join(flags)}")
        for tx in view["transactions"]:
            print(f"    {tx['id']}  {tx['category']:<8} {tx['amount_display']:>16}  "
                  f"seen={format_timestamp_ms(tx['first_seen_at'])}  conf={tx['confirmations']}")


def _print_outgoing(client):
    txs = client.addresses.get_outgoing_transactions()
    print_info(f"Outgoing transactions ({len(txs)})")
    for tx in txs:
        label = f"  label={tx['label']}" if tx.get("label") else ""
        print(f"  {tx['id']} -> {tx['belongs_to_address']}  {tx['amount_display']}  conf={tx['confirmations']}{label}")


def main(argv=None):
    """Command line interface for walletstore"""
    parser = argparse.ArgumentParser(description="Inspect wallet address snapshots")
    parser.add_argument('--version', action='store_true', help='Show version')
    parser.add_argument('snapshots', nargs='*', help='Address snapshot JSON files, applied in order')
    parser.add_argument('--height', type=int, default=None, help='Current block height')
    parser.add_argument('--skip-missing-category', action='store_true',
                        help='Skip transactions without a category instead of aborting the batch')
    parser.add_argument('--json', action='store_true', help='Print views as JSON')

    args = parser.parse_args(argv)

    if args.version:
        print(f"walletstore v{__version__}")
        return 0

    if not args.snapshots:
        print("walletstore - Use 'walletstore --help' for options")
        return 0

    apply_profile()
    policy = MissingCategoryPolicy.SKIP_TRANSACTION if args.skip_missing_category else None
    client = WalletClient(missing_category_policy=policy, current_block_height=args.height)

    for path in args.snapshots:
        try:
            snapshot = _load_snapshot(path)
        except (OSError, ValueError) as e:
            print_error(f"❌ Could not read {path}: {e}")
            return 1
        client.dispatch(types.ON_ADDRESS_SUBSCRIPTION, snapshot)

    if args.json:
        json.dump({
            "wallet_addresses": client.addresses.wallet_addresses(),
            "outgoing_transactions": client.addresses.get_outgoing_transactions(),
            "mints": client.mint.get_mints(),
        }, sys.stdout, indent=2, default=str)
        print()
    else:
        _print_wallet_addresses(client)
        _print_outgoing(client)
        print_success(f"✅ {client.get_summary()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
