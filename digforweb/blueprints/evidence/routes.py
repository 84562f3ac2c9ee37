"""
Evidence routes.
"""
from flask import render_template, redirect, url_for, flash, request
from flask_login import login_required
from digforweb.blueprints.evidence import evidence_bp
from digforweb.blueprints.evidence.forms import EvidenceForm
from digforweb.blueprints.helpers import (
    ConfirmDeleteForm, apply_validation_errors, describe_plan, form_values, navigate, search
)
from digforweb.exceptions import ValidationError
from digforweb.models.entities import EntityKind
from digforweb.services.entity_store import get_store
from digforweb.utils.decorators import require_permission
from digforweb.utils.hashing import generate_integrity_hash

PAGE = 'evidence'
KIND = EntityKind.EVIDENCE


def _evidence_values(form):
    values = form_values(form, KIND)
    if form.generate_hash.data:
        values['integrity_hash'] = generate_integrity_hash(
            values.get('evidence_type'), values.get('storage_location')
        )
    return values


@evidence_bp.route('/')
@login_required
@require_permission('view')
def index():
    """List all evidence, optionally searched by type or storage location."""
    navigate(PAGE, 'list')
    store = get_store()
    query = request.args.get('q', '')
    items = search(store.list(KIND), query, 'evidence_type', 'storage_location')

    cases = {c.id: c for c in store.list(EntityKind.CASE)}

    return render_template(
        'evidence/index.html',
        evidence_items=items,
        cases=cases,
        query=query,
        can_create_evidence=store.can_create(KIND)
    )


@evidence_bp.route('/<int:evidence_id>')
@login_required
@require_permission('view')
def detail(evidence_id):
    """View evidence details."""
    store = get_store()
    evidence = store.get(KIND, evidence_id)
    navigate(PAGE, 'detail', evidence_id)

    return render_template(
        'evidence/detail.html',
        evidence=evidence,
        case=store.find(EntityKind.CASE, evidence.case_id)
    )


@evidence_bp.route('/create', methods=['GET', 'POST'])
@login_required
@require_permission('create')
def create():
    """Register new evidence."""
    store = get_store()
    if not store.can_create(KIND):
        flash('Create a case before registering evidence.', 'warning')
        return redirect(url_for('evidence.index'))

    navigate(PAGE, 'create')
    form = EvidenceForm()
    form.set_case_choices(store.list(EntityKind.CASE))
    if request.method == 'GET':
        preselected = request.args.get('case_id', type=int)
        if preselected is not None:
            form.case_id.data = preselected

    if form.validate_on_submit():
        try:
            evidence = store.create(KIND, _evidence_values(form))
        except ValidationError as e:
            apply_validation_errors(form, e)
        else:
            flash(f'Evidence #{evidence.id} ({evidence.evidence_type}) registered.', 'success')
            navigate(PAGE, 'detail', evidence.id)
            return redirect(url_for('evidence.detail', evidence_id=evidence.id))

    return render_template('evidence/form.html', form=form, evidence=None)


@evidence_bp.route('/<int:evidence_id>/edit', methods=['GET', 'POST'])
@login_required
@require_permission('update')
def edit(evidence_id):
    """Edit evidence."""
    store = get_store()
    navigation = navigate(PAGE, 'edit', evidence_id)
    if navigation.resolve(PAGE, lambda i: store.exists(KIND, i)) != 'edit':
        flash(f'Evidence #{evidence_id} no longer exists.', 'warning')
        navigate(PAGE, 'list')
        return redirect(url_for('evidence.index'))

    evidence = store.get(KIND, evidence_id)
    form = EvidenceForm(obj=evidence)
    form.set_case_choices(store.list(EntityKind.CASE))

    if form.validate_on_submit():
        try:
            evidence = store.update(KIND, evidence_id, _evidence_values(form))
        except ValidationError as e:
            apply_validation_errors(form, e)
        else:
            flash(f'Evidence #{evidence_id} updated.', 'success')
            navigate(PAGE, 'detail', evidence_id)
            return redirect(url_for('evidence.detail', evidence_id=evidence_id))

    return render_template('evidence/form.html', form=form, evidence=evidence)


@evidence_bp.route('/<int:evidence_id>/delete', methods=['GET', 'POST'])
@login_required
@require_permission('delete')
def delete(evidence_id):
    """Delete one item of evidence."""
    store = get_store()
    evidence = store.get(KIND, evidence_id)
    form = ConfirmDeleteForm()

    if form.validate_on_submit():
        plan = store.delete(KIND, evidence_id)
        flash(f'Evidence #{evidence_id} deleted ({describe_plan(plan)}).', 'success')
        navigate(PAGE, 'list')
        return redirect(url_for('evidence.index'))

    return render_template(
        'confirm_delete.html',
        form=form,
        entity=evidence,
        title=f'Evidence #{evidence.id}: {evidence.evidence_type}',
        plan=store.preview_delete(KIND, evidence_id),
        cancel_url=url_for('evidence.detail', evidence_id=evidence_id)
    )
