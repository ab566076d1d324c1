"""
CLI runner for the newsdesk API.
Loads .env, configures logging, and serves the FastAPI app with uvicorn.
"""
from __future__ import annotations

import argparse
import logging
import os

import uvicorn
from dotenv import load_dotenv


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve financial headlines, quotes, and digests over HTTP.")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "4001")))
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "INFO").upper())
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    # env-backed argparse defaults need .env loaded first
    load_dotenv()
    args = _parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s - %(message)s",
    )
    logging.getLogger(__name__).info("server_starting host=%s port=%s", args.host, args.port)
    uvicorn.run("newsdesk.api_server:app", host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
