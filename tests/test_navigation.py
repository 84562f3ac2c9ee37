"""
Tests for the page / sub-view navigation state machine.
"""
import pytest
from digforweb.services.navigation import (
    CREATE, DASHBOARD, DETAIL, EDIT, LIST, NavigationState
)


@pytest.mark.unit
class TestNavigationState:
    """Transitions of NavigationState."""

    def test_initial_state(self):
        state = NavigationState()

        assert state.page == DASHBOARD
        for page in ('victims', 'cases', 'evidence', 'actions'):
            assert state.view(page) == LIST
            assert state.selected_id(page) is None

    def test_view_detail_and_back(self):
        state = NavigationState().select_page('cases')
        state.view_detail('cases', 3)

        assert state.view('cases') == DETAIL
        assert state.selected_id('cases') == 3

        state.back('cases')
        assert state.view('cases') == LIST
        assert state.selected_id('cases') is None

    def test_start_create_clears_selection(self):
        state = NavigationState().start_edit('victims', 2)
        state.start_create('victims')

        assert state.view('victims') == CREATE
        assert state.selected_id('victims') is None

    def test_select_page_resets_every_subview(self):
        state = NavigationState()
        state.start_edit('victims', 1)
        state.view_detail('evidence', 5)

        state.select_page('cases')

        assert state.page == 'cases'
        assert state.view('victims') == LIST
        assert state.selected_id('evidence') is None

    def test_unknown_page_is_rejected(self):
        with pytest.raises(ValueError):
            NavigationState().select_page('reports')

    def test_dashboard_has_no_subviews(self):
        with pytest.raises(ValueError):
            NavigationState().view_detail(DASHBOARD, 1)

    def test_resolve_edit_of_missing_entity_falls_back_to_list(self):
        state = NavigationState().start_edit('cases', 7)

        assert state.resolve('cases', lambda entity_id: False) == LIST
        assert state.resolve('cases', lambda entity_id: entity_id == 7) == EDIT

    def test_round_trip_through_dict(self):
        state = NavigationState().view_detail('actions', 4)

        restored = NavigationState.from_dict(state.to_dict())

        assert restored.page == 'actions'
        assert restored.view('actions') == DETAIL
        assert restored.selected_id('actions') == 4

    @pytest.mark.parametrize('data', [None, 'junk', {'page': 'nowhere'},
                                      {'subviews': {'cases': ['teleport', 1]}}])
    def test_malformed_data_gives_initial_state(self, data):
        state = NavigationState.from_dict(data)

        assert state.page == DASHBOARD
        assert state.view('cases') == LIST
