# core/errors.py


class PoolError(ValueError):
    """Base class for every rejected pool operation."""


class InvalidAsset(PoolError):
    pass


class IdenticalAssets(PoolError):
    pass


class ZeroAmount(PoolError):
    pass


class InsufficientOutput(PoolError):
    pass


class InsufficientLiquidity(PoolError):
    pass


class TransferFailed(PoolError):
    pass
