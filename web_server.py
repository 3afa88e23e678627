#!/usr/bin/env python3
"""
CLI tool to start the release server.

This script provides a convenient command-line interface to start the
FastAPI backend server using uvicorn.

Usage:
    python3 web_server.py                    # Start with defaults
    python3 web_server.py --host 0.0.0.0     # Listen on all interfaces
    python3 web_server.py --port 8080        # Use custom port
    python3 web_server.py --reload           # Enable auto-reload for development

Environment Variables:
    APP_URL: Public origin used to build download links
    RELEASE_SERVER_ASSET_DIR: Directory holding asset files
    RELEASE_SERVER_DB_URL: Database URL
    RELEASE_SERVER_ENV: Environment (production/development, default: development)
    RELEASE_SERVER_LOG_LEVEL: Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
"""

import argparse
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv


def load_env_file() -> None:
    """
    Load environment variables from backend/.env file.

    Variables already set in the environment take precedence over
    .env values.
    """
    env_path = Path(__file__).parent / "backend" / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)


def parse_arguments() -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace with host, port, and reload flags
    """
    parser = argparse.ArgumentParser(
        description="Start the release server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start development server with auto-reload
  python3 web_server.py --reload

  # Production configuration
  APP_URL=https://updates.example.com python3 web_server.py --host 0.0.0.0 --port 8000

Environment Variables:
  APP_URL                     Public origin used in download links
  RELEASE_SERVER_ASSET_DIR    Directory holding asset files
  RELEASE_SERVER_DB_URL       Database URL
  RELEASE_SERVER_ENV          Environment (production/development)
  RELEASE_SERVER_LOG_LEVEL    Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        """
    )

    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1). "
             "Use 0.0.0.0 to listen on all interfaces."
    )

    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind the server to (default: 8000)"
    )

    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development. Not recommended for production."
    )

    return parser.parse_args()


def main() -> None:
    """Main entry point for the web server CLI tool."""
    args = parse_arguments()

    # Ensure the repo root is on sys.path so "backend.src.main" is importable
    repo_root = str(Path(__file__).parent)
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)

    load_env_file()

    print("\nStarting release server...")
    print(f"Host: {args.host}")
    print(f"Port: {args.port}")
    print(f"Auto-reload: {'enabled' if args.reload else 'disabled'}")
    print(f"\nAPI documentation: http://{args.host}:{args.port}/docs")
    print(f"Health check: http://{args.host}:{args.port}/health")
    print("\nPress CTRL+C to stop the server\n")

    try:
        uvicorn.run(
            "backend.src.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level="info",
        )
    except KeyboardInterrupt:
        print("\n\nServer stopped by user (CTRL+C)")
        sys.exit(0)


if __name__ == "__main__":
    main()
