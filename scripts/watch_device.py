#!/usr/bin/env python3
"""Watch a single device from the terminal.

Mounts a device view, prints the header, summary cards and the first
history page, then keeps printing the live status until interrupted.

Usage
-----
Set environment variables and run::

    export FLEET_BACKEND_URL="http://localhost:3000"
    export FLEET_TOKEN="eyJ..."
    python scripts/watch_device.py 42

Options::

    --preset today|yesterday|week   Time window (default: today)
    --page N                        History page to show (default: 1)
    --once                          Print once and exit (no live refresh)
    --json                          Output the view state as JSON
    --verbose, -v                   Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from fleetview import DeviceView, DeviceViewState, FleetClient, FleetConfig, ViewPhase  # noqa: E402
from fleetview.views import render_header, render_history, render_summary  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _print_state(state: DeviceViewState, config: FleetConfig) -> None:
    tz = ZoneInfo(config.time_zone) if config.time_zone else None
    out: list[str] = []

    if state.snapshot is not None:
        header = render_header(state.snapshot, tz=tz)
        out.append(_section(f"{header.title}  ({header.connection_label})"))
        out.append(f"  imei      : {header.imei}")
        out.append(f"  model     : {header.model}")
        out.append(f"  sim       : {header.sim}")
        out.append(f"  last seen : {header.last_seen}")
        out.append(f"  {header.ignition_label}   {header.satellites_label}   {header.power_badge or ''}")

    if state.window is not None:
        out.append(_section(f"SUMMARY  {state.preset}  {state.window.start_iso} -> {state.window.end_iso}"))
        cards = render_summary(state.summary)
        if not cards:
            out.append("  (no statistics)")
        for card in cards:
            suffix = f" ({card.sub_label})" if card.sub_label else ""
            out.append(f"  {card.icon} {card.label}: {card.value}{suffix}")
        out.append(f"  track points: {len(state.track)}")

        table = render_history(state.history, state.cursor, tz=tz)
        out.append(_section(f"HISTORY  {table.pagination.label}"))
        if table.empty_message:
            out.append(f"  {table.empty_message}")
        for row in table.rows:
            out.append(f"  {row.time}  {row.status:<8} {row.speed:>10}  fuel {row.fuel:>6}  {row.location}")

    print("\n".join(out))


def _print_live(state: DeviceViewState) -> None:
    status = state.snapshot.real_time_status if state.snapshot is not None else None
    if status is None:
        print("  live: no status")
        return
    print(
        f"  live: {status.connection_status} position={status.position} "
        f"speed={status.speed} heading={status.heading} at={state.refreshed_at}"
    )


# ── main ─────────────────────────────────────────────────────


async def main() -> int:
    parser = argparse.ArgumentParser(description="Watch a fleet device's live status and telemetry.")
    parser.add_argument("device_id", help="Device to watch")
    parser.add_argument("--preset", default="today", choices=["today", "yesterday", "week"])
    parser.add_argument("--page", type=int, default=1, help="History page to show")
    parser.add_argument("--once", action="store_true", help="Print once and exit")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = FleetConfig.from_env()
    watching = False
    last_refresh: datetime | None = None

    def on_change(state: DeviceViewState) -> None:
        nonlocal last_refresh
        if not watching or state.phase != ViewPhase.READY:
            return
        if state.refreshed_at != last_refresh:
            last_refresh = state.refreshed_at
            _print_live(state)

    async with FleetClient(config) as client:
        view = DeviceView(client, args.device_id, preset=args.preset, listener=on_change)
        state = await view.mount()
        try:
            if state.phase == ViewPhase.FAILED:
                print(f"!! {state.error} (back to {state.back_path})", file=sys.stderr)
                return 1
            if args.page > 1:
                state = await view.change_page(args.page)

            if args.json_mode:
                print(json.dumps(state.model_dump(mode="json"), indent=2, ensure_ascii=False))
                return 0

            _print_state(state, config)
            if args.once:
                return 0

            last_refresh = state.refreshed_at
            watching = True
            print(f"\nWatching every {config.refresh_interval:g}s, Ctrl+C to stop.")
            while True:
                await asyncio.sleep(3600)
        finally:
            await view.unmount()


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        pass
