"""KPI pages: MTTR, MTBF and Pareto over the recorded breakdowns."""

from flask import jsonify, render_template, request

from modules.breakdowns.service import get_lifecycle_service

from . import bp
from .metrics import machine_names, mtbf, mttr, pareto


def _report():
    breakdowns = get_lifecycle_service().list_breakdowns()
    all_machines = machine_names(breakdowns)
    # ?machine=BM-01&machine=BM-02 ; nothing selected -> every machine
    selected = [m.strip() for m in request.args.getlist("machine") if m.strip()] or all_machines
    return {
        "machines": all_machines,
        "selected": selected,
        "mttr": mttr(breakdowns, selected),
        "mtbf": mtbf(breakdowns, selected),
        "pareto": pareto(breakdowns, selected),
    }


@bp.route("/")
def kpi_dashboard():
    return render_template("kpi/index.html", **_report())


@bp.route("/api")
def api_kpi():
    return jsonify(_report())
