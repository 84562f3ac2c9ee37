"""Evidence blueprint."""
from flask import Blueprint

evidence_bp = Blueprint('evidence', __name__)

from digforweb.blueprints.evidence import routes
