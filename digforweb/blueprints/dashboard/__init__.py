"""Dashboard and page navigation blueprint."""
from flask import Blueprint

dashboard_bp = Blueprint('dashboard', __name__)

from digforweb.blueprints.dashboard import routes
