"""Forensic actions blueprint."""
from flask import Blueprint

actions_bp = Blueprint('actions', __name__)

from digforweb.blueprints.actions import routes
