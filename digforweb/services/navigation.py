"""
Page / sub-view navigation state.

One top-level page is selected at a time. Each resource page keeps its own
sub-view (list, detail, create, edit) and optional selected id. Switching
pages resets every sub-view so no state leaks between pages. The state is
kept in the Flask session between requests.
"""
from flask import session


DASHBOARD = 'dashboard'
RESOURCE_PAGES = ('victims', 'cases', 'evidence', 'actions')
PAGES = (DASHBOARD,) + RESOURCE_PAGES

LIST = 'list'
DETAIL = 'detail'
CREATE = 'create'
EDIT = 'edit'
VIEWS = (LIST, DETAIL, CREATE, EDIT)

SESSION_KEY = 'navigation'


class NavigationState:
    """Navigation state machine; starts on the dashboard."""

    def __init__(self):
        self.page = DASHBOARD
        self.subviews = {page: (LIST, None) for page in RESOURCE_PAGES}

    def view(self, page):
        return self.subviews[self._resource(page)][0]

    def selected_id(self, page):
        return self.subviews[self._resource(page)][1]

    def select_page(self, page):
        if page not in PAGES:
            raise ValueError(f'Unknown page: {page}')
        self.page = page
        self._reset_all()
        return self

    def view_detail(self, page, entity_id):
        return self._set(page, DETAIL, entity_id)

    def start_create(self, page):
        return self._set(page, CREATE, None)

    def start_edit(self, page, entity_id):
        return self._set(page, EDIT, entity_id)

    def back(self, page):
        return self._set(page, LIST, None)

    def resolve(self, page, exists):
        """
        The sub-view to render for ``page``.

        ``detail`` and ``edit`` need a selected id that ``exists(id)``
        confirms; otherwise the page falls back to ``list``.
        """
        view, entity_id = self.subviews[self._resource(page)]
        if view in (DETAIL, EDIT) and (entity_id is None or not exists(entity_id)):
            return LIST
        return view

    def to_dict(self):
        return {
            'page': self.page,
            'subviews': {page: [view, entity_id] for page, (view, entity_id) in self.subviews.items()},
        }

    @classmethod
    def from_dict(cls, data):
        """Rebuild from ``to_dict`` output; malformed data yields the initial state."""
        state = cls()
        if not isinstance(data, dict):
            return state
        if data.get('page') in PAGES:
            state.page = data['page']
        for page, value in (data.get('subviews') or {}).items():
            if page in RESOURCE_PAGES and isinstance(value, (list, tuple)) and len(value) == 2:
                view, entity_id = value
                if view in VIEWS:
                    state.subviews[page] = (view, entity_id)
        return state

    def _set(self, page, view, entity_id):
        page = self._resource(page)
        self.page = page
        self.subviews[page] = (view, entity_id)
        return self

    def _reset_all(self):
        for page in RESOURCE_PAGES:
            self.subviews[page] = (LIST, None)

    @staticmethod
    def _resource(page):
        if page not in RESOURCE_PAGES:
            raise ValueError(f'Page has no sub-views: {page}')
        return page

    def __repr__(self):
        return f'<NavigationState {self.page} {self.subviews}>'


def load_navigation():
    """Navigation state of the current session."""
    return NavigationState.from_dict(session.get(SESSION_KEY))


def save_navigation(state):
    session[SESSION_KEY] = state.to_dict()
    return state
