#!/usr/bin/env python3
"""Dump all data the trailerfleet library can fetch.

This script calls every read-only endpoint of the fleet backend,
printing both the parsed model fields **and** the raw API JSON so you
can spot fields that aren't parsed yet, followed by the derived fleet
KPIs.

Usage
-----
Set environment variables and run::

    export TRAILERFLEET_BASE_URL="https://fleet.example.com"
    export TRAILERFLEET_API_TOKEN="..."        # optional
    python scripts/dump_fleet.py

Options::

    --days N             Analytics range (7, 30 or 90; default 30)
    --json               Output as machine-readable JSON
    --output FILE        Write output to FILE instead of stdout
    --skip NAME          Skip an endpoint (repeatable)
    --watch SECONDS      Keep polling the fleet overview and print KPIs
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import traceback
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pydantic import BaseModel  # noqa: E402

from trailerfleet import FleetClient, FleetConfig  # noqa: E402
from trailerfleet.aggregation import fleet_kpis, job_site_rollup, network_kpis  # noqa: E402
from trailerfleet.formatting import display, format_mb  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


def _parsed(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", exclude={"raw"})
    if isinstance(obj, dict):
        return {key: _parsed(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_parsed(item) for item in obj]
    return obj


def _raw(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return getattr(obj, "raw", {})
    if isinstance(obj, dict):
        return {key: _raw(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_raw(item) for item in obj]
    return obj


def _print_result(name: str, obj: Any, out: list[str]) -> None:
    out.append(_section(name))
    out.append(json.dumps(_parsed(obj), indent=2, default=str, ensure_ascii=False))
    out.append(f"\n  ── {name} (raw JSON) ──")
    out.append(json.dumps(_raw(obj), indent=2, default=str, ensure_ascii=False))


# ── main ─────────────────────────────────────────────────────


async def dump_endpoints(
    client: FleetClient,
    *,
    days: int,
    skip: set[str],
    json_mode: bool,
) -> dict[str, Any]:
    """Fetch and dump every read endpoint."""
    calls: dict[str, Callable[[], Awaitable[Any]]] = {
        "sites": client.get_sites,
        "fleet_latest": client.get_fleet_latest,
        "fleet_combined": client.get_fleet_combined,
        "fleet_energy": client.get_fleet_energy,
        "fleet_alerts": client.get_fleet_alerts,
        "fleet_network": client.get_fleet_network,
        "intelligence": client.get_fleet_intelligence,
        "job_sites": client.get_job_sites,
        "analytics": lambda: client.get_fleet_analytics(days),
        "rankings": lambda: client.get_rankings(days),
        "my_work": client.get_my_work,
        "actions": client.get_actions,
        "settings": client.get_settings,
    }
    out: list[str] = []
    data: dict[str, Any] = {}
    for name, call in calls.items():
        if name in skip:
            continue
        try:
            value = await call()
            _print_result(name, value, out)
            data[name] = {"parsed": _parsed(value), "raw": _raw(value), "value": value}
        except Exception as exc:
            out.append(_section(name))
            out.append(f"  !! {name} failed: {exc}")
            data[name] = {"error": str(exc), "traceback": traceback.format_exc()}

    if not json_mode:
        print("\n".join(out))
    return data


def _kpi_lines(data: dict[str, Any]) -> list[str]:
    def value(name: str) -> Any:
        return data.get(name, {}).get("value")

    lines = [_section("KPIs")]
    sites, latest, combined = value("sites"), value("fleet_latest"), value("fleet_combined")
    if sites is not None and latest is not None:
        kpis = fleet_kpis(sites, latest, combined)
        lines.append(f"  trailers  : {kpis.online}/{kpis.total} reporting, {kpis.alarm_count} in alarm")
        lines.append(f"  avg SOC   : {display(kpis.avg_soc, suffix='%')}")
        lines.append(f"  yield     : {display(kpis.total_yield_today, digits=2, suffix=' kWh')}")
        lines.append(f"  gateways  : {kpis.net_online}/{kpis.net_total} online")
    job_sites = value("job_sites")
    if job_sites is not None:
        rollup = job_site_rollup(job_sites)
        lines.append(
            f"  job sites : {rollup.job_site_count} ({rollup.critical} critical, "
            f"{rollup.at_risk} at risk, {rollup.offline} offline)"
        )
    devices = value("fleet_network")
    if devices is not None:
        net = network_kpis(devices, job_sites or ())
        lines.append(f"  network   : {net.online}/{net.total} online, usage {format_mb(net.total_usage_mb)}")
        if net.weakest_name:
            lines.append(f"  weakest   : {net.weakest_name} ({display(net.weakest_rsrp, digits=0, suffix=' dBm')})")
    return lines


async def watch(client: FleetClient, interval: float) -> None:
    """Poll the overview sources and print KPIs whenever the inventory joins a snapshot."""
    sites = client.poll(client.get_sites, name="sites", interval=interval)
    latest = client.poll(client.get_fleet_latest, name="fleet_latest", interval=interval)
    combined = client.poll(client.get_fleet_combined, name="fleet_combined", interval=interval)
    try:
        while True:
            await asyncio.sleep(interval)
            if sites.data is None or latest.data is None:
                errors = [source.error for source in (sites, latest) if source.error]
                print(f"{datetime.now(UTC).isoformat()}  waiting for data {errors or ''}")
                continue
            kpis = fleet_kpis(sites.data, latest.data, combined.data)
            print(
                f"{datetime.now(UTC).isoformat()}  {kpis.online}/{kpis.total} reporting  "
                f"alarm={kpis.alarm_count}  avg_soc={display(kpis.avg_soc, suffix='%')}  "
                f"net={kpis.net_online}/{kpis.net_total}"
            )
    finally:
        client.stop_polling()


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Dump all data trailerfleet can fetch for debugging / development.",
    )
    parser.add_argument("--days", type=int, default=30, help="Analytics range: 7, 30 or 90 (default 30)")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--skip", action="append", default=[], help="Skip an endpoint by name (repeatable)")
    parser.add_argument("--watch", type=float, metavar="SECONDS", help="Poll the fleet overview until interrupted")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = FleetConfig.from_env()

    async with FleetClient(config) as client:
        if args.watch:
            await watch(client, args.watch)
            return

        result: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "base_url": config.base_url,
        }
        if not args.json_mode:
            print(_section("trailerfleet dump_fleet"))
            print(f"  time      : {result['timestamp']}")
            print(f"  backend   : {config.base_url}")

        data = await dump_endpoints(client, days=args.days, skip=set(args.skip), json_mode=args.json_mode)
        kpi_lines = _kpi_lines(data)
        result["endpoints"] = {name: {k: v for k, v in entry.items() if k != "value"} for name, entry in data.items()}
        result["kpis"] = kpi_lines[1:]

    if not args.json_mode:
        print("\n".join(kpi_lines))

    # ── Output ──
    payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
    if args.json_mode and not args.output:
        print(payload)
    elif args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"JSON written to {args.output}", file=sys.stderr)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
