#!/usr/bin/env python3
"""
Estetica event listener — print every frame pushed by the backend.

Subscribes to the public stream, or to the dashboard stream when a
session token is given, and prints events as they arrive.

Run with:
    python examples/listen.py                    # public stream
    python examples/listen.py --token <jwt>      # dashboard stream

Requires: pip install httpx
Backend must be running: uvicorn estetica.main:app --port 3000
"""

import argparse
import json
import sys

import httpx

BASE = "http://localhost:3000/api"


def check_backend(client: httpx.Client) -> None:
    """Verify the backend is reachable before opening a stream."""
    try:
        resp = client.get("/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  uvicorn estetica.main:app --port 3000")
        sys.exit(1)
    health = resp.json()
    print(f"Backend {health['version']} — {health['subscribers']} open stream(s)")


def listen(client: httpx.Client, path: str) -> None:
    event = None
    with client.stream("GET", path, timeout=httpx.Timeout(10, read=None)) as resp:
        if resp.status_code != 200:
            resp.read()
            print(f"ERROR: {resp.status_code} {resp.text}")
            sys.exit(1)
        for line in resp.iter_lines():
            if line.startswith("event: "):
                event = line[len("event: "):]
            elif line.startswith("data: "):
                data = json.loads(line[len("data: "):])
                print(f"[{event}] {json.dumps(data, ensure_ascii=False)}")
            # blank line ends a frame
            elif not line:
                event = None


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--token", help="dashboard session token (JWT)")
    args = parser.parse_args()

    headers = {"Authorization": f"Bearer {args.token}"} if args.token else {}
    client = httpx.Client(base_url=BASE, headers=headers)
    check_backend(client)

    path = "/events" if args.token else "/public/events"
    print(f"Listening on {BASE}{path} (Ctrl+C to stop)\n")
    try:
        listen(client, path)
    except KeyboardInterrupt:
        pass
    finally:
        client.close()


if __name__ == "__main__":
    main()
