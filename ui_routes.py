# ui_routes.py: dashboard home page
from flask import Blueprint, current_app, render_template

from modules.breakdowns.service import get_lifecycle_service
from modules.inventory.service import get_inventory_service

ui = Blueprint("ui", __name__)


@ui.route("/")
def home():
    breakdowns = get_lifecycle_service().list_breakdowns()
    parts = get_inventory_service().list_spare_parts()

    threshold = current_app.config.get("LOW_STOCK_THRESHOLD", 5)
    recent = current_app.config.get("RECENT_BREAKDOWNS", 3)

    return render_template(
        "home.html",
        breakdown_count=len(breakdowns),
        total_loss_time=sum(b.loss_time for b in breakdowns),
        parts_count=len(parts),
        low_stock_count=sum(1 for p in parts if p.quantity < threshold),
        low_stock_threshold=threshold,
        recent_breakdowns=breakdowns[:recent],
    )
