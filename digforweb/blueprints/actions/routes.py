"""
Forensic action routes.
"""
from flask import render_template, redirect, url_for, flash, request
from flask_login import login_required
from digforweb.blueprints.actions import actions_bp
from digforweb.blueprints.actions.forms import ForensicActionForm
from digforweb.blueprints.helpers import (
    ConfirmDeleteForm, apply_validation_errors, describe_plan, form_values, navigate, search
)
from digforweb.exceptions import ValidationError
from digforweb.models.entities import EntityKind
from digforweb.services.entity_store import get_store
from digforweb.utils.decorators import require_permission

PAGE = 'actions'
KIND = EntityKind.ACTION


@actions_bp.route('/')
@login_required
@require_permission('view')
def index():
    """List forensic actions, optionally searched by stage, person in charge or status."""
    navigate(PAGE, 'list')
    store = get_store()
    query = request.args.get('q', '')
    actions = search(store.list(KIND), query, 'stage', 'person_in_charge', 'status')

    cases = {c.id: c for c in store.list(EntityKind.CASE)}

    return render_template(
        'actions/index.html',
        actions=actions,
        cases=cases,
        query=query,
        can_create_action=store.can_create(KIND)
    )


@actions_bp.route('/<int:action_id>')
@login_required
@require_permission('view')
def detail(action_id):
    """View forensic action details."""
    store = get_store()
    action = store.get(KIND, action_id)
    navigate(PAGE, 'detail', action_id)

    return render_template(
        'actions/detail.html',
        action=action,
        case=store.find(EntityKind.CASE, action.case_id)
    )


@actions_bp.route('/create', methods=['GET', 'POST'])
@login_required
@require_permission('create')
def create():
    """Record a new forensic action."""
    store = get_store()
    if not store.can_create(KIND):
        flash('Create a case before recording forensic actions.', 'warning')
        return redirect(url_for('actions.index'))

    navigate(PAGE, 'create')
    form = ForensicActionForm()
    form.set_case_choices(store.list(EntityKind.CASE))
    if request.method == 'GET':
        preselected = request.args.get('case_id', type=int)
        if preselected is not None:
            form.case_id.data = preselected

    if form.validate_on_submit():
        try:
            action = store.create(KIND, form_values(form, KIND))
        except ValidationError as e:
            apply_validation_errors(form, e)
        else:
            flash(f'Forensic action #{action.id} ({action.stage.label}) recorded.', 'success')
            navigate(PAGE, 'detail', action.id)
            return redirect(url_for('actions.detail', action_id=action.id))

    return render_template('actions/form.html', form=form, action=None)


@actions_bp.route('/<int:action_id>/edit', methods=['GET', 'POST'])
@login_required
@require_permission('update')
def edit(action_id):
    """Edit a forensic action."""
    store = get_store()
    navigation = navigate(PAGE, 'edit', action_id)
    if navigation.resolve(PAGE, lambda i: store.exists(KIND, i)) != 'edit':
        flash(f'Forensic action #{action_id} no longer exists.', 'warning')
        navigate(PAGE, 'list')
        return redirect(url_for('actions.index'))

    action = store.get(KIND, action_id)
    form = ForensicActionForm(obj=action)
    form.set_case_choices(store.list(EntityKind.CASE))

    if form.validate_on_submit():
        try:
            action = store.update(KIND, action_id, form_values(form, KIND))
        except ValidationError as e:
            apply_validation_errors(form, e)
        else:
            flash(f'Forensic action #{action_id} updated.', 'success')
            navigate(PAGE, 'detail', action_id)
            return redirect(url_for('actions.detail', action_id=action_id))

    return render_template('actions/form.html', form=form, action=action)


@actions_bp.route('/<int:action_id>/delete', methods=['GET', 'POST'])
@login_required
@require_permission('delete')
def delete(action_id):
    """Delete one forensic action."""
    store = get_store()
    action = store.get(KIND, action_id)
    form = ConfirmDeleteForm()

    if form.validate_on_submit():
        plan = store.delete(KIND, action_id)
        flash(f'Forensic action #{action_id} deleted ({describe_plan(plan)}).', 'success')
        navigate(PAGE, 'list')
        return redirect(url_for('actions.index'))

    return render_template(
        'confirm_delete.html',
        form=form,
        entity=action,
        title=f'Forensic action #{action.id}: {action.stage.label}',
        plan=store.preview_delete(KIND, action_id),
        cancel_url=url_for('actions.detail', action_id=action_id)
    )
