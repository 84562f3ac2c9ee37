"""JSON REST API blueprint (bearer token authentication)."""
from flask import Blueprint

api_bp = Blueprint('api', __name__)

from digforweb.blueprints.api import routes
