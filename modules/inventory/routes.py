"""HTTP routes for the spare parts inventory."""

from flask import abort, flash, jsonify, redirect, render_template, request, url_for

from errors import StorageError, ValidationError

from . import bp
from .service import get_inventory_service

STORAGE_FAILURE = "Database Error: the spare part could not be saved."


def _flash_errors(errors: dict) -> None:
    for messages in errors.values():
        for message in messages:
            flash(message, "warning")


@bp.route("/")
def list_parts():
    q = request.args.get("q", "").strip()
    parts = get_inventory_service().search(q)
    return render_template("inventory/list.html", parts=parts, q=q, count=len(parts))


@bp.route("/add", methods=["GET", "POST"])
def add_part():
    if request.method == "POST":
        try:
            part = get_inventory_service().create_spare_part(request.form)
        except ValidationError as exc:
            _flash_errors(exc.errors)
            return render_template("inventory/form.html", item=None, form=request.form), 400
        except StorageError:
            flash(STORAGE_FAILURE, "danger")
            return render_template("inventory/form.html", item=None, form=request.form), 500

        flash(f"Spare part {part.part_number} created.", "success")
        return redirect(url_for("inventory.list_parts"))

    return render_template("inventory/form.html", item=None, form={})


@bp.route("/<string:part_id>/edit", methods=["GET", "POST"])
def edit_part(part_id: str):
    service = get_inventory_service()
    part = service.get_spare_part(part_id)
    if part is None:
        abort(404)

    if request.method == "POST":
        try:
            service.update_spare_part(part_id, request.form)
        except ValidationError as exc:
            _flash_errors(exc.errors)
            return render_template("inventory/form.html", item=part, form=request.form), 400
        except StorageError:
            flash(STORAGE_FAILURE, "danger")
            return render_template("inventory/form.html", item=part, form=request.form), 500

        flash("Spare part updated.", "success")
        return redirect(url_for("inventory.list_parts"))

    return render_template("inventory/form.html", item=part, form={})


@bp.route("/<string:part_id>/delete", methods=["POST"])
def delete_part(part_id: str):
    try:
        removed = get_inventory_service().delete_spare_part(part_id)
    except StorageError:
        flash("Database Error: Failed to delete spare part.", "danger")
        return redirect(url_for("inventory.list_parts"))

    if removed:
        flash("Spare part deleted.", "success")
    else:
        flash("Spare part not found.", "warning")
    return redirect(url_for("inventory.list_parts"))


# ---------- JSON API ----------
@bp.route("/api/parts", methods=["GET"])
def api_list_parts():
    return jsonify([p.to_dict() for p in get_inventory_service().list_spare_parts()])


@bp.route("/api/parts/<string:part_id>", methods=["GET"])
def api_get_part(part_id: str):
    part = get_inventory_service().get_spare_part(part_id)
    if part is None:
        return jsonify(ok=False, error="not found"), 404
    return jsonify(part.to_dict())


@bp.route("/api/parts", methods=["POST"])
def api_create_part():
    try:
        part = get_inventory_service().create_spare_part(request.get_json(silent=True) or {})
    except ValidationError as exc:
        return jsonify(message=exc.message, errors=exc.errors), 400
    except StorageError:
        return jsonify(message=STORAGE_FAILURE), 500
    return jsonify(part.to_dict()), 201


@bp.route("/api/parts/<string:part_id>", methods=["PATCH"])
def api_update_part(part_id: str):
    try:
        part = get_inventory_service().update_spare_part(part_id, request.get_json(silent=True) or {})
    except ValidationError as exc:
        return jsonify(message=exc.message, errors=exc.errors), 400
    except StorageError:
        return jsonify(message=STORAGE_FAILURE), 500
    if part is None:
        return jsonify(ok=False, error="not found"), 404
    return jsonify(part.to_dict())


@bp.route("/api/parts/<string:part_id>", methods=["DELETE"])
def api_delete_part(part_id: str):
    try:
        removed = get_inventory_service().delete_spare_part(part_id)
    except StorageError:
        return jsonify(ok=False, error="Database Error: Failed to delete spare part."), 500
    if not removed:
        return jsonify(ok=False, error="not found"), 404
    return jsonify(ok=True)
