from .admin_routes import admin_bp
from .config_routes import config_bp
from .core_routes import core
from .cron_routes import cron_bp
from .pledge_routes import pledges_bp

__all__ = ["admin_bp", "config_bp", "core", "cron_bp", "pledges_bp"]
