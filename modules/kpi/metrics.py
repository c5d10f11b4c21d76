"""
Reliability KPIs computed from a list of breakdowns.

Everything here is a pure function: the input is any iterable of objects with
``machine``, ``loss_time`` (minutes) and ``created_at`` (datetime), the output
is a list of plain dicts ready for a template or ``jsonify``. Machine names
are compared after stripping whitespace. When ``machines`` is omitted every
machine present in the input is reported.
"""

from collections import defaultdict


def _name(machine) -> str:
    return (machine or "").strip()


def machine_names(breakdowns) -> list[str]:
    """Unique, trimmed, non-empty machine names in alphabetical order."""
    return sorted({_name(b.machine) for b in breakdowns if _name(b.machine)})


def _selection(breakdowns, machines) -> list[str]:
    if machines is None:
        return machine_names(breakdowns)
    selected = []
    for m in machines:
        name = _name(m)
        if name and name not in selected:
            selected.append(name)
    return selected


def _by_machine(breakdowns) -> dict[str, list]:
    grouped = defaultdict(list)
    for b in breakdowns:
        grouped[_name(b.machine)].append(b)
    return grouped


def mttr(breakdowns, machines=None) -> list[dict]:
    """
    Mean time to repair per machine: total loss time / number of repairs.

    ``mttr`` is None for a selected machine without breakdowns. Rows are
    ordered by MTTR ascending, machines without a value last.
    """
    breakdowns = list(breakdowns)
    grouped = _by_machine(breakdowns)
    rows = []
    for name in _selection(breakdowns, machines):
        items = grouped.get(name, [])
        total = sum(b.loss_time for b in items)
        rows.append({
            "machine": name,
            "mttr": total / len(items) if items else None,
            "total_loss_time": total,
            "repairs": len(items),
        })
    rows.sort(key=lambda r: (r["mttr"] is None, r["mttr"] or 0, r["machine"]))
    return rows


def mtbf(breakdowns, machines=None) -> list[dict]:
    """
    Mean time between failures per machine, in minutes.

    observed span = end of the last repair (created_at + loss_time) minus the
    first failure; operating time = span minus total downtime, floored at 0;
    mtbf = operating time / failures, None when operating time is 0.
    Rows are ordered by MTBF descending, machines without a value last.
    """
    breakdowns = list(breakdowns)
    grouped = _by_machine(breakdowns)
    rows = []
    for name in _selection(breakdowns, machines):
        items = sorted(grouped.get(name, []), key=lambda b: b.created_at)
        if not items:
            rows.append({"machine": name, "mtbf": None, "operating_time": 0, "failures": 0})
            continue

        first, last = items[0], items[-1]
        span = (last.created_at - first.created_at).total_seconds() / 60 + last.loss_time
        downtime = sum(b.loss_time for b in items)
        operating = max(0.0, span - downtime)
        rows.append({
            "machine": name,
            "mtbf": operating / len(items) if operating > 0 else None,
            "operating_time": operating,
            "failures": len(items),
        })
    rows.sort(key=lambda r: (r["mtbf"] is None, -(r["mtbf"] or 0), r["machine"]))
    return rows


def pareto(breakdowns, machines=None) -> list[dict]:
    """
    Total loss time per machine, largest first.

    Machines with zero total loss time are left out even when selected.
    ``share`` and ``cumulative_share`` are percentages of the listed total.
    """
    breakdowns = list(breakdowns)
    grouped = _by_machine(breakdowns)
    totals = []
    for name in _selection(breakdowns, machines):
        total = sum(b.loss_time for b in grouped.get(name, []))
        if total > 0:
            totals.append((name, total))
    totals.sort(key=lambda t: (-t[1], t[0]))

    grand_total = sum(total for _, total in totals)
    rows = []
    running = 0
    for name, total in totals:
        running += total
        rows.append({
            "machine": name,
            "total_loss_time": total,
            "share": 100.0 * total / grand_total,
            "cumulative_share": 100.0 * running / grand_total,
        })
    return rows
