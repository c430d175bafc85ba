from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.state import compute_balances, compute_pools
from core.utils import canonical_id, norm


def error(e: Exception) -> dict:
    return {"ok": False, "error": str(e), "kind": type(e).__name__}


def create_app(node) -> FastAPI:
    app = FastAPI(
        title="Pool Node API",
        version="0.1.0"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "*"
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.node = node

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/operator")
    def operator():
        return {
            "address": node.operator_address,
            "pubkey": node.operator_pubkey,
            "chainId": node.chain_id,
        }

    @app.get("/pools")
    def get_pools():
        return compute_pools(node.registry)

    @app.get("/pool/{address}")
    def get_pool_by_address(address: str):
        pool = node.registry.find_pool(address)
        if pool is None:
            return {"ok": False, "error": f"No pool at {address}", "kind": "InvalidAsset"}
        return {"ok": True, **pool.summary()}

    @app.get("/pools/{asset_x}/{asset_y}")
    def get_pool(asset_x: str, asset_y: str):
        try:
            pool = node.registry.get_pool(asset_x, asset_y)
        except ValueError as e:
            return error(e)
        return {"ok": True, **pool.summary()}

    @app.get("/pools/{asset_x}/{asset_y}/reserves")
    def get_reserves(asset_x: str, asset_y: str):
        try:
            pool = node.registry.get_pool(asset_x, asset_y)
        except ValueError as e:
            return error(e)

        reserve_a, reserve_b = pool.get_reserves()
        return {
            "ok": True,
            "asset_a": pool.get_asset_a(),
            "asset_b": pool.get_asset_b(),
            "reserve_a": reserve_a,
            "reserve_b": reserve_b,
        }

    @app.get("/pools/{asset_x}/{asset_y}/quote")
    def get_quote(asset_x: str, asset_y: str, asset_in: str, amount_in: int):
        try:
            pool = node.registry.get_pool(asset_x, asset_y)
            amount_out = pool.quote(asset_in, amount_in)
        except (ValueError, TypeError) as e:
            return error(e)

        return {"ok": True, "asset_in": canonical_id(asset_in), "amount_in": amount_in, "amount_out": amount_out}

    @app.get("/pools/{asset_x}/{asset_y}/events")
    def get_pool_events(asset_x: str, asset_y: str, limit: int = 50):
        try:
            pool = node.registry.get_pool(asset_x, asset_y)
        except ValueError as e:
            return error(e)
        return {"ok": True, "events": pool.events.latest(limit)}

    @app.get("/balance/{address}")
    def get_balance(address: str):
        address = norm(address)
        return {
            "address": address,
            "balances": compute_balances(node.registry, address)
        }

    @app.get("/nonce/{address}")
    def get_nonce(address: str):
        address = norm(address)
        return {
            "address": address,
            "nonce": node.next_nonce(address)
        }

    @app.get("/events")
    def get_events(limit: int = 50):
        return {"events": node.latest_events(limit)}

    @app.post("/tx/send")
    def send_tx(payload: dict):
        tx = payload.get("tx")
        signature = payload.get("signature")

        if not isinstance(tx, dict):
            return {"ok": False, "error": "Missing tx", "kind": "ValueError"}

        try:
            result, receipt = node.submit(tx, signature)
        except ValueError as e:
            return error(e)

        return {
            "ok": True,
            "txid": receipt["txid"],
            "result": result,
            "receipt": receipt
        }

    return app
