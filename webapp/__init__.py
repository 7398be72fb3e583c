# webapp/__init__.py
import logging
import sys
import time
from collections.abc import Mapping
from typing import Any, Optional

from flask import Flask, g, has_request_context, request

from .extensions import db, migrate, login_manager, babel, api as smorest_api
from .logging_utils import mask_sensitive_data, prepare_log_payload, truncate_long_values


def _is_api_request() -> bool:
    path = request.path or ""
    return path == "/api" or path.startswith("/api/")


def create_app(
    config_overrides: Optional[Mapping[str, Any]] = None,
    *,
    config_object=None,
    audit_sink=None,
):
    """Application factory.

    ``config_object`` defaults to :class:`webapp.config.Config`;
    ``config_overrides`` are applied before any extension is initialised;
    ``audit_sink`` replaces the default in-memory security audit sink.
    """
    from dotenv import load_dotenv
    from werkzeug.middleware.proxy_fix import ProxyFix

    from .config import Config
    from .error_handlers import register_error_handlers
    from .security.audit import init_audit_sink
    from .security.csrf import init_csrf_tokens
    from .security.headers import register_security_middleware
    from .api.rate_limit import init_rate_limiters

    # .env を読み込む（環境変数が未設定の場合のみ）
    load_dotenv()

    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    if config_overrides:
        app.config.update(config_overrides)

    # Client address and scheme from the first reverse proxy.
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    if app.debug:
        app.logger.setLevel(logging.DEBUG)
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        app.logger.addHandler(console_handler)
    else:
        app.logger.setLevel(logging.INFO)

    # 拡張初期化
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    babel.init_app(app, locale_selector=_select_locale)
    smorest_api.init_app(app)

    # モデル import（migrate 用に認識させる）
    from core import models as _models  # noqa: F401

    init_csrf_tokens(app)
    init_audit_sink(app, audit_sink)
    init_rate_limiters(app)
    register_security_middleware(app)

    from .api import bp as api_bp
    smorest_api.register_blueprint(api_bp, url_prefix="/api")

    register_error_handlers(app)
    register_cli_commands(app)

    @app.before_request
    def start_timer():
        g.start_time = time.perf_counter()

    @app.before_request
    def log_api_request():
        if not _is_api_request():
            return
        log_dict = {"method": request.method}
        args_dict = request.args.to_dict()
        if args_dict:
            log_dict["args"] = mask_sensitive_data(args_dict)
        input_json = request.get_json(silent=True)
        if input_json is not None:
            log_dict["json"] = mask_sensitive_data(truncate_long_values(input_json))
        app.logger.info(
            prepare_log_payload(log_dict),
            extra={
                "event": "api.input",
                "request_id": g.get("request_id"),
                "path": request.path,
            },
        )

    @app.after_request
    def log_api_response(response):
        if not _is_api_request():
            return response
        resp_json = response.get_json(silent=True) if response.is_json else None
        log_payload = prepare_log_payload(
            {
                "status": response.status_code,
                "json": mask_sensitive_data(resp_json) if resp_json is not None else None,
            }
        )
        log_extra = {
            "event": "api.output",
            "request_id": g.get("request_id"),
            "path": request.path,
        }
        if response.status_code >= 400:
            app.logger.warning(log_payload, extra=log_extra)
        else:
            app.logger.info(log_payload, extra=log_extra)
        return response

    @app.after_request
    def add_server_timing(response):
        start = g.get("start_time")
        if start is not None:
            duration = (time.perf_counter() - start) * 1000
            response.headers["Server-Timing"] = f"app;dur={duration:.2f}"
        return response

    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    if db_uri.startswith("sqlite://"):
        with app.app_context():
            db.create_all()

    return app


def _select_locale():
    """1) cookie lang 2) Accept-Language 3) default"""
    from flask import current_app

    if not has_request_context():
        return current_app.config.get("BABEL_DEFAULT_LOCALE", "en")

    cookie_lang = request.cookies.get("lang")
    if cookie_lang in current_app.config["LANGUAGES"]:
        return cookie_lang
    return request.accept_languages.best_match(current_app.config["LANGUAGES"])


def register_cli_commands(app):
    """CLI コマンドを登録"""
    import click

    @app.cli.command("seed-plans")
    @click.option("--force", is_flag=True, help="Add default tiers missing from an existing catalog.")
    def seed_plans(force):
        """Insert the default subscription plans."""
        from features.dashboard.infrastructure.repositories import PlanRepository

        inserted = PlanRepository().seed_defaults(force=force)
        if inserted:
            click.echo(f"Inserted {inserted} subscription plans.")
        else:
            click.echo("Subscription plans already exist. Use --force to add missing tiers.")

