# config/settings.py
import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name, default):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


HOST_IP = os.getenv("HOST_IP", "0.0.0.0")
HOST_PORT = int(os.getenv("HOST_PORT", "8000"))

DATA_DIR = os.getenv("DATA_DIR", "data")
CHAIN_ID = int(os.getenv("CHAIN_ID", "1"))
GENESIS_FILE = os.getenv("GENESIS_FILE", "genesis.json")
PERSIST_STATE = _flag("PERSIST_STATE", "true")
