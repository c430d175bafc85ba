# main.py
import sys

import uvicorn

from api.server import create_app
from config.settings import CHAIN_ID, DATA_DIR, GENESIS_FILE, HOST_IP, HOST_PORT, PERSIST_STATE
from core.node import PoolNode
from core.utils import loading


def main():
    try:
        node = PoolNode.boot(
            DATA_DIR,
            chain_id=CHAIN_ID,
            genesis_file=GENESIS_FILE,
            persist=PERSIST_STATE,
        )
    except ValueError as e:
        print(f"❌ State is compromised, please clean {DATA_DIR}: {e}")
        sys.exit(1)

    #🔹Print Logo
    loading(node.operator_address, HOST_IP, HOST_PORT)

    for pool in node.registry.all_pools():
        reserve_a, reserve_b = pool.get_reserves()
        print(f"🏊 {pool.get_asset_a()}-{pool.get_asset_b()} | reserves ({reserve_a}, {reserve_b}) | shares {pool.total_shares()}")

    app = create_app(node)
    uvicorn.run(app, host=HOST_IP, port=HOST_PORT)


if __name__ == "__main__":
    main()
