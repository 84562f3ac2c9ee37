"""Authentication blueprint."""
from flask import Blueprint

auth_bp = Blueprint('auth', __name__)

from digforweb.blueprints.auth import routes
