"""
Progress Overlay - CLI Entrypoint

Thin CLI wrapper that wires OverlayRuntime to a terminal: polls the
milestone status document, prints progress whenever the current step
changes and sends one-time telemetry for newly completed milestones.

Examples:
    python progress_overlay.py
    python progress_overlay.py --status http://localhost:3000/milestones.json --card
    python progress_overlay.py --once --no-telemetry
"""
import argparse
import asyncio
import sys

from core.logging import configure_logging, get_logger
from core.runtime import OverlayRuntime
from milestones.progress import ProgressView
from milestones.render import render_card, render_pill

logger = get_logger(__name__)


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Milestone progress overlay')
    parser.add_argument('--once', action='store_true', help='Run a single poll cycle and exit')
    parser.add_argument('--status', type=str, help='Status document URL or path (default: milestones.json)')
    parser.add_argument('--identity', type=str, help='Identity URL or profile file (default: makesomething.json)')
    parser.add_argument('--interval', type=float, help='Seconds between polls (default: 5)')
    parser.add_argument('--no-telemetry', action='store_true', help='Never send milestone telemetry')
    parser.add_argument('--card', action='store_true', help='Print the expanded timeline instead of the one-line pill')
    return parser.parse_args(argv)


def build_runtime(args) -> OverlayRuntime:
    def show(view: ProgressView) -> None:
        if args.card:
            print(render_card(view, runtime.catalog), flush=True)
        else:
            print(render_pill(view), flush=True)

    runtime = OverlayRuntime.from_env(
        status_source=args.status,
        identity_source=args.identity,
        interval=args.interval,
        telemetry_enabled=False if args.no_telemetry else None,
        on_progress=show,
    )
    return runtime


async def run(args) -> int:
    runtime = build_runtime(args)

    if not runtime.enabled:
        logger.warning("Progress overlay is disabled in production (APP_ENV/NODE_ENV=production)")
        return 0

    with runtime.session_context():
        dispatcher = runtime.get_dispatcher()

        if args.once:
            result = await runtime.get_poller().run_cycle()
            await dispatcher.drain()
            return 0 if result.fetched else 1

        handle = runtime.start()
        try:
            await handle.wait()
        finally:
            handle.stop()
            await dispatcher.drain()
    return 0


def main(argv=None) -> int:
    configure_logging()
    args = parse_args(argv)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        return 0


if __name__ == '__main__':
    sys.exit(main())
