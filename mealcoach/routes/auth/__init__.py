"""Auth routes package.

- core: registration, login and the auth check endpoint
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

# Import route modules (registers routes on auth_bp)
from mealcoach.routes.auth import core
