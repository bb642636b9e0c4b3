import json

from walletstore import WalletClient
from walletstore.cli import main
from walletstore.core.address_store import MissingCategoryPolicy
from walletstore.network.transport import HttpTransport
from walletstore.tests.helpers import make_snapshot, make_tx
from walletstore.tests.test_network import FakeResponse, FakeSession


def _client(session=None, **kwargs):
    transport = HttpTransport("https://wallet.example", session=session or FakeSession())
    return WalletClient("https://wallet.example", transport=transport, **kwargs)


def test_client_end_to_end():
    session = FakeSession(FakeResponse(201, {"address": "addrP", "amount": 3}))
    client = _client(session, current_block_height=105)

    client.on_address_subscription(make_snapshot(
        "addrA", make_tx("t1", "receive", blockHeight=100, blockHash="aa", blockTime=1),
        total={"balance": 10}))
    client.on_transaction_subscription({"addresses": make_snapshot("addrB", make_tx("t2", "send"))})
    client.on_transaction_subscription(make_snapshot("addrM", make_tx("m1", "mint", used=False)))
    client.update_tx_label("t2-0", "rent")
    client.create_payment_request(label="invoice", amount=3)

    assert client.addresses.wallet_addresses()[0]["confirmations"] == 6
    assert client.addresses.get_amount_received_via_address("addrA") == 10
    assert client.addresses.get_outgoing_transaction_by_id("t2-0")["label"] == "rent"
    assert client.mint.get_mint("m1-0")["used"] is False
    assert client.payment_requests.get_payment_request("addrP")["amount"] == 3

    summary = client.get_summary()
    assert summary["wallet_addresses"] == 1
    assert summary["third_party_addresses"] == 1
    assert summary["mints"] == 1
    assert summary["payment_requests"] == 1


def test_client_block_height_event():
    client = _client()
    client.on_address_subscription(make_snapshot(
        "addrA", make_tx("t1", "receive", blockHeight=100, blockHash="aa", blockTime=1)))
    client.set_block_height(101)
    assert client.addresses.wallet_addresses()[0]["confirmations"] == 2


def test_client_policy_passthrough():
    client = _client(missing_category_policy=MissingCategoryPolicy.SKIP_TRANSACTION)
    assert client.addresses.missing_category_policy is MissingCategoryPolicy.SKIP_TRANSACTION


def test_cli_prints_json(tmp_path, capsys):
    snapshot_file = tmp_path / "snapshot.json"
    snapshot_file.write_text(json.dumps(make_snapshot(
        "addrA", make_tx("t1", "receive", blockHeight=100, blockHash="aa", blockTime=1))))

    assert main([str(snapshot_file), "--height", "105", "--json"]) == 0
    out = capsys.readouterr().out
    data = json.loads(out[out.index("{"):])
    assert data["wallet_addresses"][0]["confirmations"] == 6


def test_cli_missing_file(tmp_path):
    assert main([str(tmp_path / "missing.json")]) == 1


def test_cli_version(capsys):
    assert main(["--version"]) == 0
    assert "walletstore v" in capsys.readouterr().out
