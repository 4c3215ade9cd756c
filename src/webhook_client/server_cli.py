"""CLI entry point for the webhook client server."""

import argparse
import os


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="webhook-client-server",
        description="Webhook client: receive, verify, store and dispatch inbound webhooks",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8080, help="Bind port (default: 8080)")
    parser.add_argument(
        "--local",
        action="store_true",
        help="Local dev mode: SQLite database, no Redis required",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Override WEBHOOK_CLIENT_LOG_LEVEL for this run",
    )
    args = parser.parse_args(argv)

    if args.local:
        os.environ["WEBHOOK_CLIENT_LOCAL_MODE"] = "1"
    if args.log_level:
        os.environ["WEBHOOK_CLIENT_LOG_LEVEL"] = args.log_level

    import uvicorn

    uvicorn.run(
        "webhook_client.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level or "info",
    )


if __name__ == "__main__":
    main()
