from flask import jsonify

from features.dashboard.application.use_cases import DashboardStatsUseCase

from . import bp
from .context import RequestContext, require_auth
from .serializers import serialize_stats


@bp.get("/stats")
@require_auth
def get_stats(ctx: RequestContext):
    """Dashboard counters for the caller."""

    return jsonify(serialize_stats(DashboardStatsUseCase().execute(ctx.user_id)))
