import pytest
from nacl.signing import SigningKey

from core.events import AddLiquidity, RemoveLiquidity, Swap
from core.node import PoolNode
from core.pool import Pool
from core.registry import PoolRegistry
from core.token import Token

ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20

# X sorts below Y, so X is asset A
X = "0x" + "11" * 20
Y = "0x" + "22" * 20
Z = "0x" + "33" * 20


def replay_reserves(events, asset_a, asset_b):
    """Reserves and total shares rebuilt from a pool's notifications."""
    reserves = {asset_a: 0, asset_b: 0}
    total_shares = 0

    for event in events:
        if isinstance(event, Swap):
            reserves[event.asset_in] += event.amount_in
            reserves[event.asset_out] -= event.amount_out
        elif isinstance(event, AddLiquidity):
            reserves[asset_a] += event.amount_a
            reserves[asset_b] += event.amount_b
            total_shares += event.shares
        elif isinstance(event, RemoveLiquidity):
            reserves[asset_a] -= event.amount_a
            reserves[asset_b] -= event.amount_b
            total_shares -= event.shares

    return reserves[asset_a], reserves[asset_b], total_shares


@pytest.fixture
def token_x():
    return Token(X, "X")


@pytest.fixture
def token_y():
    return Token(Y, "Y")


@pytest.fixture
def pool(token_x, token_y):
    return Pool(token_x, token_y)


@pytest.fixture
def fund():
    """Mint `amount` to holder and approve the pool to pull all of it."""
    def _fund(token, holder, pool, amount):
        token.mint(holder, amount)
        token.approve(holder, pool.address, token.allowance(holder, pool.address) + amount)
    return _fund


@pytest.fixture
def seeded_pool(pool, token_x, token_y, fund):
    """Pool at reserves (100, 400) with 200 shares held by ALICE."""
    fund(token_x, ALICE, pool, 100)
    fund(token_y, ALICE, pool, 400)
    pool.add_liquidity(ALICE, 100, 400)
    return pool


@pytest.fixture
def registry():
    registry = PoolRegistry()
    registry.register_token(X, "X")
    registry.register_token(Y, "Y")
    registry.create_pool(X, Y)
    return registry


@pytest.fixture
def node(registry):
    return PoolNode(registry, chain_id=1, signing_key=SigningKey.generate())
