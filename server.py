"""
deckgen Server Entry Point.

This module serves as the entry point for the deckgen server.
All application logic is organized in the `deckgen` package.

Usage:
    python server.py                 # run the API server
    python server.py --dump-config   # print the default configuration
"""
import argparse

from deckgen.config import dump_default_config, settings


def main() -> None:
    parser = argparse.ArgumentParser(description="deckgen API server")
    parser.add_argument(
        "--dump-config",
        action="store_true",
        help="print the default configuration as .env lines and exit",
    )
    args = parser.parse_args()

    if args.dump_config:
        print(dump_default_config(), end="")
        return

    import uvicorn

    uvicorn.run(
        "deckgen.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
