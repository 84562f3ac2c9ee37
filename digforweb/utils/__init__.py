"""
Utility modules package.
"""
from digforweb.utils.hashing import calculate_data_hash, generate_integrity_hash
from digforweb.utils.decorators import require_permission, token_required

__all__ = [
    'calculate_data_hash',
    'generate_integrity_hash',
    'require_permission',
    'token_required',
]
