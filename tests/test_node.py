import json

import pytest
from eth_account import Account

from conftest import X, Y
from core.errors import InvalidAsset, TransferFailed
from core.node import PoolNode
from core.operator_keystore import verify_receipt
from core.transaction import Transaction
from core.tx_engine import sign_tx


@pytest.fixture
def account(registry):
    account = Account.create()
    registry.get_token(X).mint(account.address, 1_000)
    registry.get_token(Y).mint(account.address, 4_000)
    return account


def signed(node, account, action, params):
    tx = Transaction(account.address, action, params, node.next_nonce(account.address), node.chain_id).to_dict()
    return tx, sign_tx(tx, account.key)


def seed(node, account):
    pool = node.registry.get_pool(X, Y)
    for asset in (X, Y):
        node.submit(*signed(node, account, "approve", {"asset": asset, "spender": pool.address, "amount": 10_000}))
    return node.submit(*signed(node, account, "add_liquidity", {
        "asset_x": Y, "asset_y": X, "amount_a_desired": 100, "amount_b_desired": 400,
    }))


def test_add_liquidity_and_swap(node, account):
    result, _ = seed(node, account)
    assert result == {"amount_a": 100, "amount_b": 400, "shares": 200}

    result, receipt = node.submit(*signed(node, account, "swap", {"asset_in": X, "asset_out": Y, "amount_in": "10"}))

    assert result == {"amount_out": 36}
    assert receipt["nonce"] == 3
    assert node.next_nonce(account.address) == 4
    assert node.registry.get_pool(X, Y).get_reserves() == (110, 364)


def test_receipt_is_signed_by_operator(node, account):
    _, receipt = seed(node, account)

    assert receipt["operator"] == node.operator_address
    assert verify_receipt(receipt, bytes.fromhex(node.operator_pubkey))

    receipt["result"]["shares"] = 1
    assert not verify_receipt(receipt, bytes.fromhex(node.operator_pubkey))


def test_rejected_tx_keeps_nonce_and_state(node, account):
    seed(node, account)
    pool = node.registry.get_pool(X, Y)
    before = (pool.get_reserves(), node.registry.get_token(X).balance_of(account.address))

    with pytest.raises(TransferFailed):
        node.submit(*signed(node, account, "swap", {"asset_in": X, "asset_out": Y, "amount_in": 5_000}))

    assert node.next_nonce(account.address) == 3
    assert (pool.get_reserves(), node.registry.get_token(X).balance_of(account.address)) == before


def test_unknown_asset_is_typed(node, account):
    with pytest.raises(InvalidAsset):
        node.submit(*signed(node, account, "swap", {"asset_in": X, "asset_out": "0x" + "99" * 20, "amount_in": 1}))
    with pytest.raises(InvalidAsset):
        node.submit(*signed(node, account, "approve", {"asset": "0x" + "99" * 20, "spender": Y, "amount": 1}))

    assert node.next_nonce(account.address) == 0


def test_replayed_tx_is_rejected(node, account):
    tx, signature = signed(node, account, "transfer", {"asset": X, "to": "0x" + "99" * 20, "amount": 5})
    node.submit(tx, signature)

    with pytest.raises(ValueError, match="Invalid nonce"):
        node.submit(tx, signature)


def test_event_feed(node, account):
    seed(node, account)
    node.submit(*signed(node, account, "swap", {"asset_in": Y, "asset_out": X, "amount_in": 40}))

    events = node.latest_events(10)

    assert [e["event"] for e in events] == ["AddLiquidity", "Swap"]
    assert events[-1]["pool"] == node.registry.get_pool(X, Y).address
    assert events[-1]["amount_out"] == 9
    assert node.latest_events(0) == []


def test_boot_from_genesis_and_reload(tmp_path):
    genesis = {
        "chain_id": 7,
        "tokens": [{"address": X, "symbol": "X"}, {"address": Y, "symbol": "Y"}],
        "allocations": [{"asset": X, "to": "0x" + "a1" * 20, "amount": 50}],
        "pools": [[Y, X]],
    }
    genesis_file = tmp_path / "genesis.json"
    genesis_file.write_text(json.dumps(genesis))
    data_dir = tmp_path / "data"

    node = PoolNode.boot(data_dir, 7, genesis_file)
    node.nonces["0x" + "a1" * 20] = 4
    node.persist()

    reloaded = PoolNode.boot(data_dir, 7, genesis_file)

    assert reloaded.operator_address == node.operator_address
    assert reloaded.next_nonce("0x" + "A1" * 20) == 4
    assert reloaded.registry.get_token(X).balance_of("0x" + "a1" * 20) == 50
    assert len(reloaded.registry.pools) == 1

    with pytest.raises(ValueError, match="another chainId"):
        PoolNode.boot(data_dir, 8, genesis_file)


def test_boot_without_genesis(tmp_path):
    node = PoolNode.boot(tmp_path, 1, tmp_path / "missing.json", persist=False)

    assert node.registry.pools == {}
    assert not (tmp_path / "state.enc").exists()
