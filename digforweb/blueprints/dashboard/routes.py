"""
Dashboard and page navigation routes.
"""
from flask import render_template, redirect, url_for, abort
from flask_login import login_required
from digforweb.blueprints.dashboard import dashboard_bp
from digforweb.services.dashboard_service import get_dashboard_stats
from digforweb.services.entity_store import get_store
from digforweb.services.navigation import (
    DASHBOARD, PAGES, load_navigation, save_navigation
)
from digforweb.utils.decorators import require_permission


@dashboard_bp.route('/dashboard/')
@login_required
@require_permission('view')
def index():
    """Main dashboard."""
    navigation = load_navigation()
    if navigation.page != DASHBOARD:
        save_navigation(navigation.select_page(DASHBOARD))

    stats = get_dashboard_stats(get_store())

    return render_template('dashboard/index.html', stats=stats)


def _page_url(page):
    if page == DASHBOARD:
        return url_for('dashboard.index')
    return url_for(f'{page}.index')


@dashboard_bp.route('/nav/<page>')
@login_required
def select_page(page):
    """Switch the top-level page; every sub-view starts over on its list."""
    if page not in PAGES:
        abort(404)
    save_navigation(load_navigation().select_page(page))
    return redirect(_page_url(page))


@dashboard_bp.route('/nav/<page>/back')
@login_required
def back(page):
    """Return a resource page to its list view."""
    if page not in PAGES:
        abort(404)
    navigation = load_navigation()
    if page != DASHBOARD:
        navigation.back(page)
    save_navigation(navigation)
    return redirect(_page_url(page))
