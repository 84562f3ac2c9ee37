"""
Victim routes.
"""
from flask import render_template, redirect, url_for, flash, request
from flask_login import login_required
from digforweb.blueprints.victims import victims_bp
from digforweb.blueprints.victims.forms import VictimForm
from digforweb.blueprints.helpers import (
    ConfirmDeleteForm, apply_validation_errors, describe_plan, form_values, navigate, search
)
from digforweb.exceptions import ValidationError
from digforweb.models.entities import EntityKind
from digforweb.services.entity_store import get_store
from digforweb.utils.decorators import require_permission

PAGE = 'victims'
KIND = EntityKind.VICTIM


@victims_bp.route('/')
@login_required
@require_permission('view')
def index():
    """List all victims, optionally searched by name."""
    navigate(PAGE, 'list')
    store = get_store()
    query = request.args.get('q', '')
    return render_template(
        'victims/index.html',
        victims=search(store.list(KIND), query, 'name'),
        query=query
    )


@victims_bp.route('/<int:victim_id>')
@login_required
@require_permission('view')
def detail(victim_id):
    """Victim details with the cases reported for it."""
    store = get_store()
    victim = store.get(KIND, victim_id)
    navigate(PAGE, 'detail', victim_id)

    children = store.children_of(KIND, victim_id)
    return render_template(
        'victims/detail.html',
        victim=victim,
        cases=children[EntityKind.CASE]
    )


@victims_bp.route('/create', methods=['GET', 'POST'])
@login_required
@require_permission('create')
def create():
    """Register a new victim."""
    navigate(PAGE, 'create')
    form = VictimForm()

    if form.validate_on_submit():
        try:
            victim = get_store().create(KIND, form_values(form, KIND))
        except ValidationError as e:
            apply_validation_errors(form, e)
        else:
            flash(f'Victim "{victim.name}" registered.', 'success')
            navigate(PAGE, 'detail', victim.id)
            return redirect(url_for('victims.detail', victim_id=victim.id))

    return render_template('victims/form.html', form=form, victim=None)


@victims_bp.route('/<int:victim_id>/edit', methods=['GET', 'POST'])
@login_required
@require_permission('update')
def edit(victim_id):
    """Edit a victim."""
    store = get_store()
    navigation = navigate(PAGE, 'edit', victim_id)
    if navigation.resolve(PAGE, lambda i: store.exists(KIND, i)) != 'edit':
        flash(f'Victim #{victim_id} no longer exists.', 'warning')
        navigate(PAGE, 'list')
        return redirect(url_for('victims.index'))

    victim = store.get(KIND, victim_id)
    form = VictimForm(obj=victim)

    if form.validate_on_submit():
        try:
            victim = store.update(KIND, victim_id, form_values(form, KIND))
        except ValidationError as e:
            apply_validation_errors(form, e)
        else:
            flash(f'Victim "{victim.name}" updated.', 'success')
            navigate(PAGE, 'detail', victim_id)
            return redirect(url_for('victims.detail', victim_id=victim_id))

    return render_template('victims/form.html', form=form, victim=victim)


@victims_bp.route('/<int:victim_id>/delete', methods=['GET', 'POST'])
@login_required
@require_permission('delete')
def delete(victim_id):
    """Delete a victim and, after confirmation, every case, evidence and action under it."""
    store = get_store()
    victim = store.get(KIND, victim_id)
    form = ConfirmDeleteForm()

    if form.validate_on_submit():
        plan = store.delete(KIND, victim_id)
        flash(f'Victim "{victim.name}" deleted ({describe_plan(plan)}).', 'success')
        navigate(PAGE, 'list')
        return redirect(url_for('victims.index'))

    return render_template(
        'confirm_delete.html',
        form=form,
        entity=victim,
        title=f'Victim #{victim.id}: {victim.name}',
        plan=store.preview_delete(KIND, victim_id),
        cancel_url=url_for('victims.detail', victim_id=victim_id)
    )
