"""
Case management routes.
"""
from flask import render_template, redirect, url_for, flash, request
from flask_login import login_required
from digforweb.blueprints.cases import cases_bp
from digforweb.blueprints.cases.forms import CaseForm
from digforweb.blueprints.helpers import (
    ConfirmDeleteForm, apply_validation_errors, describe_plan, form_values, navigate, search
)
from digforweb.exceptions import ValidationError
from digforweb.models.entities import EntityKind
from digforweb.services.entity_store import get_store
from digforweb.utils.decorators import require_permission

PAGE = 'cases'
KIND = EntityKind.CASE


@cases_bp.route('/')
@login_required
@require_permission('view')
def index():
    """List all cases, optionally searched by type or status."""
    navigate(PAGE, 'list')
    store = get_store()
    query = request.args.get('q', '')
    cases = search(store.list(KIND), query, 'case_type', 'status')

    victims = {v.id: v for v in store.list(EntityKind.VICTIM)}

    return render_template(
        'cases/index.html',
        cases=cases,
        victims=victims,
        query=query,
        can_create_case=store.can_create(KIND)
    )


@cases_bp.route('/<int:case_id>')
@login_required
@require_permission('view')
def detail(case_id):
    """View case details with its evidence and forensic actions."""
    store = get_store()
    case = store.get(KIND, case_id)
    navigate(PAGE, 'detail', case_id)

    children = store.children_of(KIND, case_id)
    return render_template(
        'cases/detail.html',
        case=case,
        victim=store.find(EntityKind.VICTIM, case.victim_id),
        evidence_items=children[EntityKind.EVIDENCE],
        actions=children[EntityKind.ACTION]
    )


@cases_bp.route('/create', methods=['GET', 'POST'])
@login_required
@require_permission('create')
def create():
    """Create new case."""
    store = get_store()
    if not store.can_create(KIND):
        flash('Register a victim before creating a case.', 'warning')
        return redirect(url_for('cases.index'))

    navigate(PAGE, 'create')
    form = CaseForm()
    form.set_victim_choices(store.list(EntityKind.VICTIM))
    if request.method == 'GET':
        preselected = request.args.get('victim_id', type=int)
        if preselected is not None:
            form.victim_id.data = preselected

    if form.validate_on_submit():
        try:
            case = store.create(KIND, form_values(form, KIND))
        except ValidationError as e:
            apply_validation_errors(form, e)
        else:
            flash(f'Case #{case.id} ({case.case_type}) created.', 'success')
            navigate(PAGE, 'detail', case.id)
            return redirect(url_for('cases.detail', case_id=case.id))

    return render_template('cases/form.html', form=form, case=None)


@cases_bp.route('/<int:case_id>/edit', methods=['GET', 'POST'])
@login_required
@require_permission('update')
def edit(case_id):
    """Edit case."""
    store = get_store()
    navigation = navigate(PAGE, 'edit', case_id)
    if navigation.resolve(PAGE, lambda i: store.exists(KIND, i)) != 'edit':
        flash(f'Case #{case_id} no longer exists.', 'warning')
        navigate(PAGE, 'list')
        return redirect(url_for('cases.index'))

    case = store.get(KIND, case_id)
    form = CaseForm(obj=case)
    form.set_victim_choices(store.list(EntityKind.VICTIM))
    form.ensure_status_choice(case.status)

    if form.validate_on_submit():
        try:
            case = store.update(KIND, case_id, form_values(form, KIND))
        except ValidationError as e:
            apply_validation_errors(form, e)
        else:
            flash(f'Case #{case_id} updated.', 'success')
            navigate(PAGE, 'detail', case_id)
            return redirect(url_for('cases.detail', case_id=case_id))

    return render_template('cases/form.html', form=form, case=case)


@cases_bp.route('/<int:case_id>/delete', methods=['GET', 'POST'])
@login_required
@require_permission('delete')
def delete(case_id):
    """Delete a case together with its evidence and forensic actions."""
    store = get_store()
    case = store.get(KIND, case_id)
    form = ConfirmDeleteForm()

    if form.validate_on_submit():
        plan = store.delete(KIND, case_id)
        flash(f'Case #{case_id} deleted ({describe_plan(plan)}).', 'success')
        navigate(PAGE, 'list')
        return redirect(url_for('cases.index'))

    return render_template(
        'confirm_delete.html',
        form=form,
        entity=case,
        title=f'Case #{case.id}: {case.case_type}',
        plan=store.preview_delete(KIND, case_id),
        cancel_url=url_for('cases.detail', case_id=case_id)
    )
