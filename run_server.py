#!/usr/bin/env python3
"""
Startup script for the Voice Cart API.

Usage:
    # Run on the default port
    python run_server.py

    # Run with a custom port and database
    python run_server.py --port 8001 --database sqlite:///./data/cart.db

    # Run with reload for development
    python run_server.py --reload
"""

import argparse
import os


def run_server(
    host: str = "0.0.0.0",
    port: int = 8000,
    database_url: str = None,
    reload: bool = False,
    log_level: str = None,
) -> None:
    """Run the application with uvicorn."""
    # Must be set before voice_cart.config is imported by the app
    if database_url:
        os.environ["DATABASE_URL"] = database_url
    if log_level:
        os.environ["LOG_LEVEL"] = log_level

    database_url = os.environ.get("DATABASE_URL", "sqlite:///./voice_cart.db")

    print(f"\n{'=' * 50}")
    print("Starting: Voice Cart API")
    print(f"Port:     {port}")
    print(f"Database: {database_url}")
    print(f"{'=' * 50}\n")

    # Ensure data directory exists
    if database_url.startswith("sqlite:///./"):
        db_path = database_url.replace("sqlite:///./", "")
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    import uvicorn

    uvicorn.run(
        "voice_cart.main:app",
        host=host,
        port=port,
        reload=reload,
    )


def main():
    parser = argparse.ArgumentParser(
        description="Run the Voice Cart API"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=int(os.environ.get("PORT", "8000")),
        help="Port to run on (default: $PORT or 8000)",
    )
    parser.add_argument(
        "--database",
        "-d",
        help="SQLAlchemy database URL (overrides DATABASE_URL)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides LOG_LEVEL)",
    )
    parser.add_argument(
        "--reload",
        "-r",
        action="store_true",
        help="Enable auto-reload for development",
    )

    args = parser.parse_args()

    run_server(
        host=args.host,
        port=args.port,
        database_url=args.database,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
