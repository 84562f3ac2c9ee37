"""
Helpers shared by the resource blueprints (victims, cases, evidence, actions).
"""
import enum

from flask import flash
from flask_wtf import FlaskForm
from wtforms import SubmitField

from digforweb.models.entities import EntityKind, editable_field_names
from digforweb.services.navigation import load_navigation, save_navigation


class ConfirmDeleteForm(FlaskForm):
    """Explicit confirmation before a cascading delete."""
    submit = SubmitField('Delete permanently')


def enum_value(value):
    """SelectField coerce that accepts enum members as well as their values."""
    if isinstance(value, enum.Enum):
        return value.value
    return value


def optional_int(value):
    """SelectField coerce for foreign keys; the empty choice becomes None."""
    if value in (None, ''):
        return None
    return int(value)


def enter_page(page):
    """
    Navigation state with ``page`` selected.

    Arriving from another page goes through ``select_page`` so no sub-view
    state leaks across pages.
    """
    navigation = load_navigation()
    if navigation.page != page:
        navigation.select_page(page)
    return navigation


def navigate(page, view, entity_id=None):
    """Record the sub-view being rendered for ``page`` in the session."""
    navigation = enter_page(page)
    if view == 'detail':
        navigation.view_detail(page, entity_id)
    elif view == 'create':
        navigation.start_create(page)
    elif view == 'edit':
        navigation.start_edit(page, entity_id)
    else:
        navigation.back(page)
    return save_navigation(navigation)


def form_values(form, kind):
    """Canonical field values of ``kind`` present on ``form``."""
    return {
        name: form[name].data
        for name in editable_field_names(kind)
        if name in form
    }


def apply_validation_errors(form, error):
    """Attach a ``ValidationError`` to the matching form fields; flash the rest."""
    for field, messages in error.errors.items():
        if field in form:
            form[field].errors = list(form[field].errors) + list(messages)
        else:
            for message in messages:
                flash(message, 'danger')


def describe_plan(plan):
    """Human readable summary of a ``DeletionPlan``."""
    parts = []
    for kind in EntityKind:
        count = len(plan.ids(kind))
        if count:
            parts.append(f'{count} {kind.label.lower()}')
    return ', '.join(parts) if parts else 'nothing'


def search(entities, term, *attrs):
    """Entities whose ``attrs`` contain ``term``, case-insensitively."""
    if not term:
        return list(entities)
    term = term.strip().lower()

    def text(entity, attr):
        value = getattr(entity, attr)
        return str(getattr(value, 'value', value) or '').lower()

    return [e for e in entities if any(term in text(e, attr) for attr in attrs)]
