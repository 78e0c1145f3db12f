import streamlit as st
import matplotlib.pyplot as plt
from streamlit_folium import st_folium

from coordinate_plotter import (
    FileReader,
    IdleScheduler,
    PlotterSession,
    ViewSynchronizer,
    load_config,
)
from coordinate_plotter.surfaces import FoliumSurface, HostRegion, StaticMapSurface

st.set_page_config(layout="wide")

###############################################################################
# SESSION SETUP
###############################################################################

@st.cache_resource
def get_config():
    """Loads the plotter config once per server process."""
    return load_config()


def get_session(config) -> PlotterSession:
    """One PlotterSession (and one Leaflet map) per browser session."""
    if 'plotter_session' not in st.session_state:
        surface = FoliumSurface(
            tiles=config.tile_url,
            attribution=config.tile_attribution,
            location=config.initial_center,
            zoom_start=config.initial_zoom,
        )
        session = PlotterSession.create(surface, config)
        session.recompute()
        st.session_state.plotter_session = session
    return st.session_state.plotter_session


def get_file_reader() -> FileReader:
    if 'file_reader' not in st.session_state:
        st.session_state.file_reader = FileReader()
    return st.session_state.file_reader


config = get_config()
session = get_session(config)
reader = get_file_reader()

###############################################################################
# CALLBACKS
###############################################################################

def _invalidate_map_image():
    st.session_state.pop('map_png', None)


def on_add_coordinates():
    _invalidate_map_image()
    ok = session.add_manual(
        st.session_state.get('lat_input', ''),
        st.session_state.get('lon_input', ''),
        st.session_state.get('label_input', ''),
    )
    if ok:  # fields stay as typed when the entry was invalid
        st.session_state.lat_input = ''
        st.session_state.lon_input = ''
        st.session_state.label_input = ''


def on_clear_coordinates():
    session.clear_all()
    _invalidate_map_image()


def on_csv_uploaded():
    _invalidate_map_image()
    uploaded = st.session_state.get('csv_uploader')
    if uploaded is None:
        return
    reader.submit(uploaded.name, uploaded)
    for result in reader.drain(wait=True, timeout=30):
        session.apply_read(result)


def on_process_pasted_csv():
    _invalidate_map_image()
    session.import_text(st.session_state.get('csv_text', ''))


def build_map_image() -> bytes:
    """Renders the current records onto a static basemap and returns PNG bytes."""
    static = StaticMapSurface(
        tiles=config.tiles,
        basemap=config.basemap,
        location=config.initial_center,
        zoom_start=config.initial_zoom,
    )
    scheduler = IdleScheduler()
    sync = ViewSynchronizer(
        static,
        HostRegion(width=config.static_width_px, height=config.map_height_px),
        scheduler,
        padding_px=config.fit_padding_px,
        zoom_level=config.zoom_to_record_level,
    )
    sync.recompute(session.records, session.zoom_intent, session.layout)
    scheduler.run_pending()
    if static.basemap_error:
        st.warning(static.basemap_error)
    try:
        return static.to_png()
    finally:
        plt.close(static.fig)

###############################################################################
# LAYOUT
###############################################################################
expanded = session.layout.expanded

if not expanded:
    st.title("Interactive Map Coordinate Plotter")
    input_col, map_col = st.columns([1, 2])
else:
    input_col, map_col = None, st.container()

if input_col is not None:
    with input_col:
        st.header("Input Coordinates")
        st.text_input("Latitude", placeholder="Latitude (-90 to 90)", key="lat_input")
        st.text_input("Longitude", placeholder="Longitude (-180 to 180)", key="lon_input")
        st.text_input("Label", placeholder="Label (optional)", key="label_input")
        st.button("Add Coordinates", on_click=on_add_coordinates, key="add_button")
        st.button("Clear All Coordinates", on_click=on_clear_coordinates, key="clear_button")

        upload_tab, paste_tab = st.tabs(["Upload CSV", "Paste CSV"])
        with upload_tab:
            st.markdown(
                "The CSV file **must** contain `latitude` and `longitude` columns; "
                "`label` is optional."
            )
            st.file_uploader(
                "Drag and drop a CSV file here, or click to select a file",
                type="csv",
                accept_multiple_files=False,
                key="csv_uploader",
                on_change=on_csv_uploaded,
            )
        with paste_tab:
            st.text_area("Paste your CSV content here...", height=130, key="csv_text")
            st.button("Process CSV", on_click=on_process_pasted_csv, key="process_csv_button")

        if session.last_error:
            st.error(session.last_error)
        elif session.last_summary is not None:
            st.success(session.last_summary.message())

# layout for this pass is in place; deferred resizes can run now
session.sync.scheduler.run_pending()

with map_col:
    title_col, toggle_col = st.columns([6, 1])
    title_col.subheader("Interactive Map")
    toggle_col.button(
        "Exit full width" if expanded else "Full width",
        on_click=session.toggle_expanded,
        key="expand_toggle",
    )
    for warning in session.warnings:
        st.warning(str(warning))
    try:
        st_folium(
            session.sync.surface.render(),
            height=config.map_height_px,
            use_container_width=True,
            returned_objects=[],
            key="coordinate_map",
        )
    except Exception as e:
        st.error(f"Error during map rendering: {e}")

if not expanded:
    st.subheader("Coordinates Table")
    st.dataframe(session.store.to_frame(), use_container_width=True, hide_index=True)

    csv_col, png_col = st.columns(2)
    with csv_col:
        st.download_button(
            label="Download Coordinates as CSV",
            data=session.store.to_csv(),
            file_name="coordinates.csv",
            mime="text/csv",
            disabled=len(session.store) == 0,
            key="download_csv",
        )
    with png_col:
        if st.button("Generate Map Image", key="generate_png_button", disabled=len(session.store) == 0):
            try:
                st.session_state.map_png = build_map_image()
            except Exception as e:
                st.error(f"Error during map generation: {e}")
        if st.session_state.get('map_png'):
            st.download_button(
                label="Download Map as PNG",
                data=st.session_state.map_png,
                file_name="coordinate_map.png",
                mime="image/png",
                key="download_png",
            )
