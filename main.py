"""
MnemoNotes Server Entry Point

Run with: python main.py
Or with uvicorn: uvicorn app:app --reload

Run one decay pass without the HTTP server (for cron):
    python main.py decay
"""

import argparse
import asyncio
import os
import sys

import uvicorn


async def run_decay_once() -> int:
    """Build an engine, run the decay job once and print the report."""
    from src.config import Config
    from src.services.note_engine import NoteEngine
    from src.utils.logger import setup_logging

    config = Config.from_env()
    setup_logging(level=config.logging.level, log_to_file=False)

    engine = NoteEngine.from_config(config)
    await engine.initialize()
    try:
        report = await engine.decay.run()
    finally:
        await engine.close()

    print(report.model_dump_json(by_alias=True))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="mnemonotes", description="MnemoNotes server")
    parser.add_argument("command", nargs="?", default="serve", choices=["serve", "decay"])
    parser.add_argument("--host", default=os.getenv("MNEMO_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("MNEMO_PORT", "8000")))
    args = parser.parse_args(argv)

    if args.command == "decay":
        return asyncio.run(run_decay_once())

    # Use reload only in development
    is_dev = os.getenv("ENVIRONMENT", "development") == "development"

    uvicorn.run(
        "app:app",
        host=args.host,
        port=args.port,
        reload=is_dev,
        log_level="info",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
