"""KPI module package."""

from flask import Blueprint

bp = Blueprint("kpi", __name__, url_prefix="/kpi")

from . import routes  # noqa: E402  pylint: disable=wrong-import-position

__all__ = ["bp", "routes"]
