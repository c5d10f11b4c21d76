"""HTTP routes for logging and removing breakdowns."""

from itertools import zip_longest

from flask import abort, flash, jsonify, redirect, render_template, request, url_for

from errors import StorageError
from modules.inventory.service import get_inventory_service

from . import bp
from .models import BREAKDOWN_CATEGORIES
from .service import get_lifecycle_service

ERROR_STATUS = {"validation": 400, "inventory": 409, "storage": 500}


def _draft_from_form(form) -> dict:
    """
    Form rows come in as parallel ``spare_part_id`` / ``quantity_consumed``
    lists; rows left completely blank are ignored, half-filled rows are kept
    so validation rejects them.
    """
    spares = []
    rows = zip_longest(form.getlist("spare_part_id"), form.getlist("quantity_consumed"), fillvalue="")
    for part_id, qty in rows:
        if not part_id.strip() and not qty.strip():
            continue
        spares.append({"spare_part_id": part_id, "quantity_consumed": qty})
    return {
        "loss_time": form.get("loss_time"),
        "line": form.get("line"),
        "machine": form.get("machine"),
        "description": form.get("description"),
        "category": form.get("category"),
        "spares_consumed": spares,
    }


def _render_form(form, status: int = 200):
    try:
        parts = get_inventory_service().list_spare_parts()
    except StorageError:
        parts = []
    return render_template(
        "breakdowns/form.html",
        form=form,
        parts=parts,
        categories=BREAKDOWN_CATEGORIES,
    ), status


@bp.route("/")
def list_breakdowns():
    items = get_lifecycle_service().list_breakdowns()
    return render_template("breakdowns/list.html", items=items)


@bp.route("/<string:breakdown_id>")
def breakdown_detail(breakdown_id: str):
    item = get_lifecycle_service().get_breakdown(breakdown_id)
    if item is None:
        abort(404)
    return render_template("breakdowns/detail.html", item=item)


@bp.route("/create", methods=["GET", "POST"])
def create_breakdown():
    if request.method == "POST":
        result = get_lifecycle_service().create_breakdown(_draft_from_form(request.form))
        if not result.ok:
            flash(result.message, "warning")
            for messages in result.errors.values():
                for message in messages:
                    flash(message, "warning")
            return _render_form(request.form, ERROR_STATUS.get(result.kind, 400))

        flash(result.message, "success")
        return redirect(url_for("breakdowns.breakdown_detail", breakdown_id=result.breakdown.id))

    return _render_form({})


@bp.route("/<string:breakdown_id>/delete", methods=["POST"])
def delete_breakdown(breakdown_id: str):
    result = get_lifecycle_service().delete_breakdown(breakdown_id)
    flash(result.message, "success" if result.success else "warning")
    return redirect(url_for("breakdowns.list_breakdowns"))


# ---------- JSON API ----------
@bp.route("/api", methods=["GET"])
def api_list_breakdowns():
    return jsonify([b.to_dict() for b in get_lifecycle_service().list_breakdowns()])


@bp.route("/api/<string:breakdown_id>", methods=["GET"])
def api_get_breakdown(breakdown_id: str):
    item = get_lifecycle_service().get_breakdown(breakdown_id)
    if item is None:
        return jsonify(ok=False, error="not found"), 404
    return jsonify(item.to_dict())


@bp.route("/api", methods=["POST"])
def api_create_breakdown():
    result = get_lifecycle_service().create_breakdown(request.get_json(silent=True) or {})
    if result.ok:
        return jsonify(result.to_dict()), 201
    return jsonify(result.to_dict()), ERROR_STATUS.get(result.kind, 400)


@bp.route("/api/<string:breakdown_id>", methods=["DELETE"])
def api_delete_breakdown(breakdown_id: str):
    result = get_lifecycle_service().delete_breakdown(breakdown_id)
    if result.success:
        return jsonify(result.to_dict())
    return jsonify(result.to_dict()), 404 if result.not_found else 500
