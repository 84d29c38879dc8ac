"""
Routes Package - API Blueprints
"""

from casthub.routes.auth import auth_bp
from casthub.routes.users import users_bp
from casthub.routes.admin import admin_bp
from casthub.routes.studio import studio_bp
from casthub.routes.talent import talent_bp

__all__ = [
    'auth_bp',
    'users_bp',
    'admin_bp',
    'studio_bp',
    'talent_bp',
]
