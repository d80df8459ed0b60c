import asyncio
import io
from datetime import date, datetime

import nest_asyncio
import pandas as pd
import streamlit as st

from scraper.config import DEFAULT_FORMAT, REGISTER_API_URL
from scraper.errors import FetchError
from scraper.fetcher import post_json
from scraper.persistence import RegisterStore

# Streamlit may already be driving an event loop in this thread
nest_asyncio.apply()

COLUMNS = ["number", "title", "decided", "category"]

st.set_page_config(page_title="FMCSA Register Dashboard", layout="wide")

st.title("FMCSA Register Dashboard")

store = RegisterStore()

if "entries" not in st.session_state:
    st.session_state.entries = []
    st.session_state.last_updated = ""
    st.session_state.error = ""
    st.session_state.loaded_date = None


def load_from_store(selected_date, explicit=False):
    day = selected_date.isoformat()
    try:
        rows = store.fetch(date_from=day, date_to=day)
    except (OSError, ValueError) as e:
        st.session_state.error = f"Database connection issue: {e}"
        return
    st.session_state.entries = [{k: r.get(k, "") for k in COLUMNS} for r in rows]
    st.session_state.error = ""
    if rows:
        st.session_state.last_updated = f"DB: {datetime.now().strftime('%H:%M:%S')}"
    else:
        st.session_state.last_updated = ""
        if explicit:
            st.session_state.error = 'No records in database for this date. Click "Fetch Live Register" to scrape.'
    st.session_state.loaded_date = selected_date


def fetch_live(selected_date, source):
    url = f"{REGISTER_API_URL.rstrip('/')}/api/fmcsa-register"
    payload = {"date": selected_date.isoformat(), "source": source}
    try:
        response = asyncio.run(post_json(url, payload, raise_for_status=False))
        data = response.json()
    except (FetchError, ValueError) as e:
        st.session_state.error = f"Unable to fetch register data: {e}"
        return
    if not response.ok:
        st.session_state.error = data.get("error") or f"Server error: {response.status}"
        return
    if not (data.get("success") and data.get("entries")):
        st.session_state.error = "No entries found in the register for this date."
        return
    st.session_state.entries = data["entries"]
    st.session_state.error = ""
    st.session_state.last_updated = (
        f"Live {source.upper()}: {datetime.now().strftime('%H:%M:%S')} ({data['count']} records)"
    )
    result = store.save(data["entries"], selected_date.isoformat())
    if result["success"]:
        st.toast("Saved to database")
    else:
        st.warning("Entries fetched but could not be saved.")


# --- Sidebar ---
st.sidebar.header("Register")
selected_date = st.sidebar.date_input("Reporting Date", value=date.today())
source = st.sidebar.radio("Source", ["html", "pdf"], format_func=str.upper, horizontal=True)

if st.session_state.loaded_date != selected_date:
    load_from_store(selected_date, explicit=st.session_state.loaded_date is not None)

if st.sidebar.button("Fetch Live Register", type="primary"):
    with st.spinner("Processing register..."):
        fetch_live(selected_date, source)

st.sidebar.header("Filters")
selected_category = st.sidebar.selectbox("Category", ["all"] + list(DEFAULT_FORMAT.category_labels))
search_term = st.sidebar.text_input("Search title or docket number")

# --- Filtering ---
df = pd.DataFrame(st.session_state.entries, columns=COLUMNS)
filtered = df
if selected_category != "all":
    filtered = filtered[filtered["category"] == selected_category]
if search_term:
    term = search_term.lower()
    filtered = filtered[
        filtered["title"].str.lower().str.contains(term, regex=False)
        | filtered["number"].str.lower().str.contains(term, regex=False)
    ]

if st.session_state.error:
    st.error(st.session_state.error)
if st.session_state.last_updated:
    st.caption(st.session_state.last_updated)

st.write(f"Showing {len(filtered)} of {len(df)} entries")

# --- Data Table ---
st.dataframe(filtered, use_container_width=True, hide_index=True)

# --- Export ---
with st.expander("Export Options", expanded=False):
    col1, col2 = st.columns([1, 1])
    with col1:
        csv = filtered.to_csv(index=False)
        st.download_button("Export CSV", csv, f"fmcsa_register_{selected_date.isoformat()}.csv", "text/csv")
    with col2:
        excel_buffer = io.BytesIO()
        filtered.to_excel(excel_buffer, index=False, engine='openpyxl')
        st.download_button("Export Excel", excel_buffer.getvalue(), f"fmcsa_register_{selected_date.isoformat()}.xlsx",
                           "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")

st.caption("Entries are read from the local store; use Fetch Live Register to scrape the FMCSA site for the selected date.")
