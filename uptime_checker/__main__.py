import argparse
import asyncio
import getpass
import sys
from typing import List, Optional

import uvicorn

from .auth import hash_password
from .config import Settings
from .errors import StoreFailure
from .logging_config import configure_logging
from .main import create_app
from .services.monitor import Monitor
from .services.store import create_store


async def _sweep_once(settings: Settings) -> int:
    store = create_store(settings)
    try:
        await store.init()
        results = await Monitor(store, settings).sweep()
    except StoreFailure as ex:
        print(f"sweep failed: {ex}", file=sys.stderr)
        return 1
    finally:
        await store.close()

    for r in results:
        detail = r.error or r.status_code
        print(f"{r.status.upper():<5} {r.response_time_ms:>6} ms  {r.name} ({r.url}) {detail}")
    print(f"{len(results)} website(s) checked")
    return 0


def _hash_password() -> int:
    password = getpass.getpass("Admin password: ").strip()
    if not password:
        print("Password cannot be empty.", file=sys.stderr)
        return 1
    if getpass.getpass("Repeat password: ").strip() != password:
        print("Passwords do not match.", file=sys.stderr)
        return 1
    print(hash_password(password))
    print("Set it as ADMIN_PASSWORD_HASH in the environment or .env", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="uptime-checker", description="Website uptime checker")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API, dashboard and scheduler")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)

    sub.add_parser("sweep", help="Probe every registered website once")
    sub.add_parser("hash-password", help="Print a hash for ADMIN_PASSWORD_HASH")

    args = parser.parse_args(argv)

    if args.command == "hash-password":
        return _hash_password()

    settings = Settings()
    if args.command == "sweep":
        configure_logging(settings)
        return asyncio.run(_sweep_once(settings))

    uvicorn.run(create_app(settings), host=args.host, port=args.port, log_level=settings.LOG_LEVEL.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
