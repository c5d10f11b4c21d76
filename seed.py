# seed.py: demo data, `flask --app app seed-demo`
from datetime import datetime, timedelta

import click
from flask.cli import with_appcontext

from modules.breakdowns.models import Breakdown
from modules.breakdowns.service import get_lifecycle_service
from modules.inventory.service import get_inventory_service
from store import SQLAlchemyStore

PARTS = [
    {"part_number": "SP-001", "description": "Proximity sensor M18", "quantity": 10, "location": "Rack A1"},
    {"part_number": "SP-002", "description": "V-belt SPA 1250", "quantity": 6, "location": "Rack B3"},
    {"part_number": "SP-003", "description": "Contactor 24VDC 32A", "quantity": 4, "location": "E-store"},
    {"part_number": "SP-004", "description": "Bearing 6205-2RS", "quantity": 20, "location": "Rack B1"},
]

# (days ago, line, machine, category, loss time, description, [(part_number, qty)])
BREAKDOWNS = [
    (9, "Line A", "BM-01", "Mechanical", 45, "Drive belt snapped", [("SP-002", 1)]),
    (6, "Line A", "BM-01", "Electrical", 20, "Main contactor burnt", [("SP-003", 1)]),
    (4, "Line A", "BM-02", "Instrumentation", 15, "Can detection sensor faulty", [("SP-001", 2)]),
    (2, "Line B", "Trimmer-1", "Mechanical", 90, "Spindle bearing seized", [("SP-004", 2)]),
    (1, "Line A", "BM-01", "Other", 10, "Jam cleared, no parts", []),
]


def run() -> tuple[int, int]:
    inventory = get_inventory_service()
    lifecycle = get_lifecycle_service()

    existing = {p.part_number: p for p in inventory.list_spare_parts()}
    created_parts = 0
    for data in PARTS:
        if data["part_number"] not in existing:
            existing[data["part_number"]] = inventory.create_spare_part(data)
            created_parts += 1

    if lifecycle.list_breakdowns():
        return created_parts, 0

    backdate = SQLAlchemyStore(Breakdown)
    now = datetime.utcnow()
    created_breakdowns = 0
    for days_ago, line, machine, category, loss_time, description, spares in BREAKDOWNS:
        result = lifecycle.create_breakdown({
            "line": line,
            "machine": machine,
            "category": category,
            "loss_time": loss_time,
            "description": description,
            "spares_consumed": [
                {"spare_part_id": existing[pn].id, "quantity_consumed": qty} for pn, qty in spares
            ],
        })
        if not result.ok:
            raise click.ClickException(f"{machine}: {result.message} {result.errors}")
        backdate.update(result.breakdown.id, created_at=now - timedelta(days=days_ago))
        created_breakdowns += 1

    return created_parts, created_breakdowns


@click.command("seed-demo")
@with_appcontext
def seed_demo_command():
    """Insert demo spare parts and breakdowns (skips what already exists)."""
    parts, breakdowns = run()
    click.echo(f"Seed OK: {parts} spare part(s), {breakdowns} breakdown(s) created.")
