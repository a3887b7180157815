"""
Jump to a named playlist entry once a second.

Connects to the player's RC interface and, while authenticated, keeps
issuing `goto` for the LAST playlist entry whose name matches --name.

    python tools/goto_scene.py --host localhost --port 4212 \
        --password secret --name Szene1

Needs the package installed (pip install -e .).
"""

import argparse
import asyncio

from session.client import RCClient
from session.pipeline import RCError


def last_entry_id(client: RCClient, name: str) -> int | None:
    matches = [e.id for e in client.playlist if e.name == name]
    return matches[-1] if matches else None


async def run(args: argparse.Namespace) -> None:
    client = RCClient(args.host, args.port, args.password, label="goto_scene")

    try:
        while True:
            await asyncio.sleep(args.every)

            controller = client.controller
            if controller is None:
                continue

            entry_id = last_entry_id(client, args.name)
            if entry_id is None:
                continue

            try:
                await controller.goto(entry_id)
            except RCError as e:
                print(f"goto {entry_id} failed: {e}")
    finally:
        await client.shutdown()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--host", default="localhost")
    parser.add_argument("--port", type=int, default=4212)
    parser.add_argument("--password", required=True)
    parser.add_argument("--name", required=True, help="playlist entry name")
    parser.add_argument("--every", type=float, default=1.0, help="seconds between jumps")
    args = parser.parse_args()

    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
