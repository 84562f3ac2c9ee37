"""Victims blueprint."""
from flask import Blueprint

victims_bp = Blueprint('victims', __name__)

from digforweb.blueprints.victims import routes
