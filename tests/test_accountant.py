import pytest

from conftest import ALICE
from core.accountant import pull_asset, push_asset
from core.errors import TransferFailed
from core.token import FeeOnTransferToken, Token

POOL = "0x" + "99" * 20


def test_pull_returns_received_amount():
    token = Token("0x" + "11" * 20)
    token.mint(ALICE, 100)
    token.approve(ALICE, POOL, 100)

    assert pull_asset(token, ALICE, POOL, 60) == 60
    assert token.balance_of(POOL) == 60
    assert token.allowance(ALICE, POOL) == 40


def test_pull_measures_fee_on_transfer():
    token = FeeOnTransferToken("0x" + "11" * 20, fee_bps=250)
    token.mint(ALICE, 1_000)
    token.approve(ALICE, POOL, 1_000)

    assert pull_asset(token, ALICE, POOL, 1_000) == 975


def test_pull_ignores_existing_pool_balance():
    token = Token("0x" + "11" * 20)
    token.mint(POOL, 5_000)
    token.mint(ALICE, 10)
    token.approve(ALICE, POOL, 10)

    assert pull_asset(token, ALICE, POOL, 10) == 10


def test_pull_without_allowance():
    token = Token("0x" + "11" * 20)
    token.mint(ALICE, 10)

    with pytest.raises(TransferFailed):
        pull_asset(token, ALICE, POOL, 10)


def test_push_insufficient_balance():
    token = Token("0x" + "11" * 20)

    with pytest.raises(TransferFailed):
        push_asset(token, POOL, ALICE, 1)


def test_raising_token_is_wrapped():
    token = Token("0x" + "11" * 20)
    token.mint(POOL, 10)

    def explode(*args):
        raise RuntimeError("boom")

    token.transfer_hooks.append(explode)

    with pytest.raises(TransferFailed) as info:
        push_asset(token, POOL, ALICE, 1)
    assert isinstance(info.value.__cause__, RuntimeError)
