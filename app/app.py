"""
Game rating catalog - application factory and initialization
"""
import os
import sys
import logging

from flask import Flask
import structlog

from constants import BUILD_VERSION
from settings import load_settings, merge_settings, verify_settings
from db import db, init_db
from utils import ColoredFormatter, FilterRemoveDateFromWerkzeugLogs
from auth import init_auth
from exceptions import register_exception_handlers
from metrics import init_metrics
from view_cache import build_view_cache
from services import CatalogService, ReferenceDataService

# Routes
from routes.games import games_bp
from routes.interactions import interactions_bp
from routes.catalog import catalog_bp

logger = structlog.get_logger('main')


def configure_logging(level=logging.INFO):
    formatter = ColoredFormatter(
        '[%(asctime)s.%(msecs)03d] %(levelname)s (%(module)s) %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[handler]
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if os.environ.get('LOG_FORMAT') == 'json' else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Apply filter to hide date from http access logs
    logging.getLogger('werkzeug').addFilter(FilterRemoveDateFromWerkzeugLogs())


def create_app(settings=None, cache_clock=None, today=None):
    """
    Application factory

    Args:
        settings: Explicit settings dict merged over the defaults; when
            omitted the YAML configuration file is loaded
        cache_clock: Time source for the view cache (tests)
        today: Date provider for the recent/upcoming listings (tests)
    """
    if settings is None:
        settings = load_settings()
    else:
        settings = merge_settings(settings)
        verify_settings(settings)

    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = settings["database"]["url"]
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config["CATALOG_SETTINGS"] = settings

    # Initialize components
    db.init_app(app)
    init_auth(app, settings)
    register_exception_handlers(app)

    # Shared per-instance view cache and services
    cache_kwargs = {"clock": cache_clock} if cache_clock is not None else {}
    view_cache = build_view_cache(settings, **cache_kwargs)
    service_kwargs = {"today": today} if today is not None else {}
    app.extensions["view_cache"] = view_cache
    app.extensions["catalog_service"] = CatalogService(view_cache, settings=settings, **service_kwargs)
    app.extensions["reference_service"] = ReferenceDataService(view_cache)

    # Register blueprints
    app.register_blueprint(games_bp)
    app.register_blueprint(interactions_bp)
    app.register_blueprint(catalog_bp)

    @app.route("/api/system/health")
    def health():
        return {"status": "healthy", "build": BUILD_VERSION}

    @app.route("/api/system/cache")
    def cache_stats():
        return {"code": "SUCCESS", "success": True, "data": view_cache.stats()}

    # Initialize metrics
    init_metrics(app)

    # Initialize database
    init_db(app)

    logger.info(f"Catalog application initialized (build {BUILD_VERSION})")
    return app


if __name__ == '__main__':
    configure_logging()
    application = create_app()
    application.run(host=os.environ.get("CATALOG_HOST", "0.0.0.0"), port=int(os.environ.get("CATALOG_PORT", "8465")))
