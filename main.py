"""
pixelcount - Main Entry Point

CLI interface for counting a document's pixels and running the server.
"""

import argparse
import asyncio
import sys
from pathlib import Path


def run_server():
    """Run the FastAPI server"""
    import uvicorn
    from pixelcount.core.config import settings

    uvicorn.run(
        "pixelcount.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug
    )


async def run_count(file_path: str) -> int:
    """Count pixels in a document JSON file"""
    from pixelcount.aggregator import PixelAggregator
    from pixelcount.document import PageLoadError, load_document
    from pixelcount.observability.logging import setup_logging

    setup_logging()

    path = Path(file_path)
    if not path.exists():
        print(f"File not found: {file_path}", file=sys.stderr)
        return 1

    try:
        document, loader = load_document(path)
    except ValueError as e:
        print(f"Invalid document: {e}", file=sys.stderr)
        return 1

    aggregator = PixelAggregator(document, loader)
    try:
        pixels = await aggregator.compute_total_pixels()
    except PageLoadError as e:
        print(f"Load failed: {e}", file=sys.stderr)
        return 2

    print(f"{document.name or path.name}: {pixels:,} pixels across {len(document.pages)} pages")
    return 0


def main():
    parser = argparse.ArgumentParser(description="pixelcount")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Server command
    subparsers.add_parser("server", help="Run the display API server")

    # Count command
    count_parser = subparsers.add_parser("count", help="Count pixels in a document")
    count_parser.add_argument("file", type=str, help="Path to document JSON")

    args = parser.parse_args()

    if args.command == "server":
        run_server()
    elif args.command == "count":
        sys.exit(asyncio.run(run_count(args.file)))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
