"""
Caller identity for catalog requests.

Authentication happens upstream; the gateway forwards the authenticated
user's id in a trusted header (``auth.user_header`` in settings). The
Flask-Login request loader turns that header into the current user, and
``current_caller`` exposes it to the services as a CallerContext.
"""
from flask import current_app, request
from flask_login import LoginManager, current_user
import logging

from repositories.user_repository import UserRepository
from services.interaction_guard import CallerContext

# Retrieve main logger
logger = logging.getLogger("main")

login_manager = LoginManager()


@login_manager.user_loader
def load_user(user_id):
    return UserRepository.get_by_id(int(user_id))


@login_manager.request_loader
def load_user_from_request(req):
    header = current_app.config.get("CATALOG_USER_HEADER", "X-User-Id")
    raw = req.headers.get(header)
    if not raw:
        return None
    try:
        user_id = int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {header} header: {raw!r}")
        return None
    return UserRepository.get_by_id(user_id)


def current_caller():
    """The resolved caller, or None for anonymous requests"""
    if not current_user or not current_user.is_authenticated:
        return None
    return CallerContext(user_id=current_user.id, is_admin=current_user.is_admin)


def init_auth(app, settings):
    app.config["CATALOG_USER_HEADER"] = settings.get("auth", {}).get("user_header", "X-User-Id")
    login_manager.init_app(app)
