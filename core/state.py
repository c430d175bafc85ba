# core/state.py

from core.utils import canonical_id


def compute_pools(registry):
    """Pool summaries, canonical order"""
    return [pool.summary() for pool in registry.all_pools()]


def compute_balances(registry, address):
    """Balances of every token (pool shares included) held by address"""
    address = canonical_id(address)
    balances = {}

    for token in registry.tokens.values():
        amount = token.balance_of(address)
        if amount:
            balances[token.address] = amount

    return balances

