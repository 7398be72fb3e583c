from flask import jsonify

from features.dashboard.application.use_cases import ListPlansUseCase

from . import bp
from .context import skip_auth
from .serializers import serialize_plan


@bp.get("/plans")
@skip_auth
def list_plans():
    """Public plan catalog, cheapest first."""

    plans = ListPlansUseCase().execute()
    return jsonify([serialize_plan(plan) for plan in plans])
