"""
JSON REST API.

Resources use the Indonesian field names of the mobile/web clients
(``korban``, ``kasus``, ``evidence``, ``tindakan``). Responses are wrapped
in a ``{"data": ...}`` envelope; request bodies may be bare or enveloped.
Errors are rendered as JSON by the application error handlers.
"""
import logging
from flask import jsonify, request, g
from digforweb.blueprints.api import api_bp
from digforweb.exceptions import ValidationError
from digforweb.extensions import limiter
from digforweb.models.entities import EntityKind
from digforweb.services.auth_service import authenticate, issue_token, register_user, revoke_tokens
from digforweb.services.entity_store import get_store
from digforweb.services.permissions import ROLE_OFFICER, ROLE_VIEWER
from digforweb.services.serializers import API_ADAPTER, envelope, unwrap_envelope
from digforweb.utils.decorators import token_required

logger = logging.getLogger(__name__)

RESOURCES = {
    'korban': EntityKind.VICTIM,
    'kasus': EntityKind.CASE,
    'evidence': EntityKind.EVIDENCE,
    'tindakan': EntityKind.ACTION,
}

RESOURCE_RULE = '<any(korban, kasus, evidence, tindakan):resource>'


def _json_body():
    """Request JSON object with any ``data`` envelope removed."""
    body = unwrap_envelope(request.get_json(silent=True))
    if not isinstance(body, dict):
        raise ValidationError({'__all__': ['Request body must be a JSON object.']})
    return body


def _wire_errors(kind, error):
    """Re-key a store ``ValidationError`` from model attributes to wire field names."""
    field_map = API_ADAPTER.field_map(kind)
    return ValidationError(
        {field_map.get(name, name): messages for name, messages in error.errors.items()},
        error.message
    )


def _token_response(user, message, status=200):
    return jsonify({
        'message': message,
        'token': issue_token(user),
        'role': user.api_role,
    }), status


# Authentication

@api_bp.route('/login', methods=['POST'])
@limiter.limit("5 per minute")
def login():
    """Exchange email and password for a bearer token."""
    body = _json_body()
    user = authenticate(body.get('email'), body.get('password'))
    user.update_last_login()
    logger.info(f'API login for {user.email}')
    return _token_response(user, 'Login successful.')


def _register(role):
    body = _json_body()
    confirmation = body.get('password_confirmation')
    if confirmation is not None and confirmation != body.get('password'):
        raise ValidationError({'password_confirmation': ['Passwords must match.']})

    user = register_user(
        body.get('name') or body.get('nama'),
        body.get('email'),
        body.get('password'),
        role,
        contact=body.get('contact') or body.get('kontak')
    )
    return _token_response(user, 'Registration successful.', 201)


@api_bp.route('/register-petugas', methods=['POST'])
def register_petugas():
    """Register an officer account."""
    return _register(ROLE_OFFICER)


@api_bp.route('/register-viewer', methods=['POST'])
def register_viewer():
    """Register a read-only account."""
    return _register(ROLE_VIEWER)


@api_bp.route('/logout', methods=['POST'])
@token_required
def logout():
    """Revoke every token of the calling user."""
    revoke_tokens(g.api_user)
    logger.info(f'API logout for {g.api_user.email}')
    return jsonify({'message': 'Logged out.'})


@api_bp.route('/me')
@token_required
def me():
    """The user the bearer token belongs to."""
    return jsonify(envelope(g.api_user.to_dict()))


# Resources

@api_bp.route(f'/{RESOURCE_RULE}', methods=['GET'])
@token_required
def list_resource(resource):
    kind = RESOURCES[resource]
    return jsonify(envelope(API_ADAPTER.dump_many(get_store().list(kind))))


@api_bp.route(f'/{RESOURCE_RULE}/<int:entity_id>', methods=['GET'])
@token_required
def get_resource(resource, entity_id):
    kind = RESOURCES[resource]
    return jsonify(envelope(API_ADAPTER.dump(get_store().get(kind, entity_id))))


@api_bp.route(f'/{RESOURCE_RULE}', methods=['POST'])
@token_required
def create_resource(resource):
    kind = RESOURCES[resource]
    values = API_ADAPTER.load_fields(kind, _json_body())
    try:
        entity = get_store().create(kind, values)
    except ValidationError as e:
        raise _wire_errors(kind, e)
    return jsonify(envelope(API_ADAPTER.dump(entity), f'{kind.label} created.')), 201


@api_bp.route(f'/{RESOURCE_RULE}/<int:entity_id>', methods=['PUT', 'PATCH'])
@token_required
def update_resource(resource, entity_id):
    kind = RESOURCES[resource]
    values = API_ADAPTER.load_fields(kind, _json_body())
    try:
        entity = get_store().update(kind, entity_id, values)
    except ValidationError as e:
        raise _wire_errors(kind, e)
    return jsonify(envelope(API_ADAPTER.dump(entity), f'{kind.label} updated.'))


@api_bp.route(f'/{RESOURCE_RULE}/<int:entity_id>', methods=['DELETE'])
@token_required
def delete_resource(resource, entity_id):
    """Delete an entity and its dependents; the body lists what was removed."""
    kind = RESOURCES[resource]
    store = get_store()
    # Checked first so a second DELETE of the same id answers 404
    store.get(kind, entity_id)
    plan = store.delete(kind, entity_id)
    return jsonify(envelope(
        {'deleted': plan.counts()},
        f'{kind.label} deleted.'
    ))
