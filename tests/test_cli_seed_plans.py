from sqlalchemy import delete

from core.models.subscription import SubscriptionPlan
from features.dashboard.infrastructure.repositories import PlanRepository
from webapp.extensions import db


def test_seed_plans_skips_existing_catalog(app):
    result = app.test_cli_runner().invoke(args=["seed-plans"])

    assert result.exit_code == 0
    assert "already exist" in result.output
    with app.app_context():
        assert PlanRepository().count() == 3


def test_seed_plans_into_empty_catalog(app):
    with app.app_context():
        db.session.execute(delete(SubscriptionPlan))
        db.session.commit()

    result = app.test_cli_runner().invoke(args=["seed-plans"])

    assert result.exit_code == 0
    assert "Inserted 3" in result.output


def test_force_adds_only_missing_tiers(app):
    with app.app_context():
        db.session.execute(delete(SubscriptionPlan).where(SubscriptionPlan.tier == "pro"))
        db.session.commit()

    result = app.test_cli_runner().invoke(args=["seed-plans", "--force"])

    assert result.exit_code == 0
    with app.app_context():
        tiers = sorted(plan.tier for plan in PlanRepository().list_all())
    assert tiers == ["basic", "enterprise", "pro"]
