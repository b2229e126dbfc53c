"""
Main entrypoint: follow Solana blocks and print transfers of the tracked mint.

Same as the installed `transfer-monitor` command:

    python main.py watch
    python main.py block --slot 250684537
    python main.py audit --slot 250684537

Env: SOLANA_RPC_URL, TOKEN_MINT_ADDRESS, RATE_LIMIT_MAX_REQUESTS, LOG_LEVEL, etc.
"""

import sys

from transfer_monitor.cli import main

if __name__ == "__main__":
    sys.exit(main())
