#!/usr/bin/env python
"""
Pulse console - interactive terminal front end for the intercept engine.

Usage:
    python console.py                      # interactive session
    python console.py run "Mars colony update"
    python console.py serve --port 8000
"""

import asyncio
import argparse
import json
import logging

from dotenv import load_dotenv
load_dotenv()

from config.settings import get_settings
from pulse.generation.key_gate import console_key_selector
from pulse.models.session import SessionSnapshot, ViewMode
from pulse.orchestrator import ActionDispatcher
from pulse.utils.logger import configure_logging


logger = logging.getLogger("pulse.console")

HELP_TEXT = """
Type any command, e.g. 'Mars News', 'Track @handle', 'Generate image of X', 'Create video of Y'.

  :mode news|reel|intel|creative   switch view
  :live on|off                     toggle the live stream
  :scroll OFFSET HEIGHT            scroll the reel
  :track HANDLE                    dossier for a reel author
  :state                           dump the full session as JSON
  :help                            this text
  :quit                            exit
"""


def render(snapshot: SessionSnapshot):
    """Print a compact view of the active mode."""
    view = snapshot.view
    live = "LIVE" if snapshot.is_live else "PAUSED"
    print(f"\n[{view.mode.value.upper()}] topic='{snapshot.topic}' {live}")

    if view.error:
        print(f"  ! {view.error}")

    if view.mode == ViewMode.NEWS:
        for item in snapshot.news[:10]:
            print(f"  - [{item.sentiment.value}] {item.title} ({item.platform})")
        print(f"  {len(snapshot.news)} stories")
    elif view.mode == ViewMode.REEL:
        for index, item in enumerate(snapshot.reel):
            marker = ">" if index == view.active_index else " "
            print(f"  {marker} {item.account_handle or '?'}: {item.title}")
    elif view.mode == ViewMode.INTEL:
        dossier = snapshot.dossier
        if dossier is None:
            print("  no dossier loaded")
        else:
            print(f"  {dossier.full_name} - {dossier.occupation}")
            print(f"  residence: {dossier.current_residence}")
            print(f"  identifiers: {', '.join(dossier.public_identifiers)}")
            print(f"  footprint: {dossier.digital_footprint_score:.0f}/100")
    elif view.mode == ViewMode.CREATIVE:
        for asset in snapshot.assets:
            url = asset.url if len(asset.url) < 80 else asset.url[:77] + "..."
            print(f"  [{asset.type.value}] \"{asset.prompt}\" -> {url}")


async def execute(engine: ActionDispatcher, line: str) -> bool:
    """Run one console line. Returns False when the session should end."""
    if not line.startswith(":"):
        intent = await engine.handle_request(line)
        if intent is not None:
            logger.info(f"Ran {intent.value} workflow")
        render(engine.snapshot())
        return True

    command, _, argument = line[1:].partition(" ")
    argument = argument.strip()

    if command in ("quit", "exit", "q"):
        return False
    if command == "help":
        print(HELP_TEXT)
    elif command == "state":
        print(engine.snapshot().model_dump_json(indent=2))
    elif command == "mode":
        try:
            engine.select_mode(ViewMode(argument))
        except ValueError:
            print(f"Unknown mode: {argument!r}")
        render(engine.snapshot())
    elif command == "live":
        engine.set_live(argument.lower() in ("on", "true", "1", "yes"))
        render(engine.snapshot())
    elif command == "scroll":
        try:
            offset, height = (float(value) for value in argument.split())
            engine.update_scroll(offset, height)
        except ValueError:
            print("Usage: :scroll OFFSET HEIGHT")
        render(engine.snapshot())
    elif command == "track":
        await engine.track_identity(argument)
        render(engine.snapshot())
    else:
        print(f"Unknown command: {command!r}")
    return True


async def cmd_console(args):
    """Interactive session."""
    engine = ActionDispatcher.from_settings(get_settings(), key_selector=console_key_selector)
    await engine.start()
    print(HELP_TEXT)

    try:
        while True:
            line = (await asyncio.to_thread(input, "pulse> ")).strip()
            if not line:
                render(engine.snapshot())
                continue
            if not await execute(engine, line):
                break
    except (EOFError, KeyboardInterrupt):
        print()
    finally:
        await engine.shutdown()


async def cmd_run(args):
    """Run one command and print the resulting session."""
    engine = ActionDispatcher.from_settings(get_settings(), key_selector=console_key_selector)
    engine.stream.live = False
    try:
        await engine.handle_request(args.text)
        print(json.dumps(engine.snapshot().model_dump(mode="json"), indent=2))
    finally:
        await engine.shutdown()


def cmd_serve(args):
    """Start the API server."""
    import uvicorn

    uvicorn.run("main:app", host=args.host, port=args.port, reload=args.reload)


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Pulse Intercept Engine console")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run a single command")
    run_parser.add_argument("text", help="Free-text command")

    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default=settings.host, help="Host")
    serve_parser.add_argument("--port", type=int, default=settings.port, help="Port")
    serve_parser.add_argument("--reload", action="store_true", help="Auto-reload")

    args = parser.parse_args()
    configure_logging(args.log_level)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "run":
        asyncio.run(cmd_run(args))
    else:
        asyncio.run(cmd_console(args))


if __name__ == "__main__":
    main()
