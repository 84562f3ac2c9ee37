"""
Service layer: entity store, integrity rules, permission policy,
navigation state and authentication.
"""
