"""Smoke tests for the Streamlit page."""

import pytest
from streamlit.testing.v1 import AppTest

from coordinate_plotter.session import MANUAL_ENTRY_INVALID

APP = "../streamlit_coordinate_plotter_app.py"


@pytest.fixture
def app():
    at = AppTest.from_file(APP, default_timeout=60)
    at.run()
    assert not at.exception
    return at


class TestPage:
    def test_manual_add_fills_table_and_clears_fields(self, app):
        app.text_input(key="lat_input").input("45.5")
        app.text_input(key="lon_input").input("-73.6")
        app.text_input(key="label_input").input("Montreal")
        app.button(key="add_button").click().run()
        assert not app.exception
        session = app.session_state["plotter_session"]
        assert [r.label for r in session.records] == ["Montreal"]
        assert app.text_input(key="lat_input").value == ""

    def test_invalid_entry_shows_error_and_keeps_fields(self, app):
        app.text_input(key="lat_input").input("95")
        app.text_input(key="lon_input").input("0")
        app.button(key="add_button").click().run()
        assert app.error[0].value == MANUAL_ENTRY_INVALID
        assert app.text_input(key="lat_input").value == "95"

    def test_pasted_csv_is_imported(self, app):
        app.text_area(key="csv_text").input('latitude,longitude,label\n1,2,"New York, NY"\n')
        app.button(key="process_csv_button").click().run()
        session = app.session_state["plotter_session"]
        assert [r.label for r in session.records] == ["New York, NY"]
        assert app.success[0].value == "Added 1 coordinate."

    def test_expand_hides_inputs(self, app):
        app.button(key="expand_toggle").click().run()
        assert not app.exception
        assert app.session_state["plotter_session"].layout.expanded
        assert len(app.text_input) == 0
