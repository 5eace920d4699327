import streamlit as st
from dotenv import load_dotenv
from juriscompare.utils.config import AppConfig
from juriscompare.utils.logs import setup_logging
from juriscompare.utils.types import ComparisonStep, Slot
from juriscompare.session.workspace import Workspace
from juriscompare.report.json_export import build_analysis_json
from juriscompare.ui.components import (
    sidebar, document_input, camera_panel, stat_cards, risk_map, clause_insight, counsel_panel, bump_doc_version, forget_uploads,
)

load_dotenv()
config = AppConfig.from_env()
setup_logging(config.log_level)

st.set_page_config(page_title="JurisCompare", layout="wide", page_icon="⚖️")

if 'workspace' not in st.session_state:
    st.session_state.workspace = Workspace(config)
ws: Workspace = st.session_state.workspace

sidebar(config, ws)

head_cols = st.columns([4, 1])
with head_cols[0]:
    st.markdown("<h2 style='margin-top:0;'>Legal Document Intelligence</h2>", unsafe_allow_html=True)
with head_cols[1]:
    if ws.step == ComparisonStep.RESULTS and st.button("♻️ Reset Workspace", use_container_width=True):
        ws.reset()
        forget_uploads()
        bump_doc_version()
        st.rerun()

if ws.error:
    err_cols = st.columns([6, 1])
    with err_cols[0]:
        st.error(ws.error)
    with err_cols[1]:
        if st.button("Dismiss", use_container_width=True):
            ws.dismiss_error()
            st.rerun()

if ws.camera_target is not None:
    camera_panel(ws)

elif ws.step in (ComparisonStep.UPLOAD, ComparisonStep.COMPARING):
    st.write(
        "Compare two versions of a contract. Paste text, upload a file or scan a page; "
        "the model checks liability shifts, indemnity traps and IP ownership changes."
    )
    left, right = st.columns(2)
    with left:
        document_input(ws, Slot.BASELINE)
    with right:
        document_input(ws, Slot.COUNTERPARTY)
    if st.button("🚀 Start Analysis", type="primary", use_container_width=True, disabled=not ws.ready_to_analyze):
        with st.spinner("Comparing semantic definitions, liability caps, and commercial exposure..."):
            ws.start_analysis()
        st.rerun()

elif ws.step == ComparisonStep.RESULTS and ws.result is not None:
    stat_cards(ws.result)
    main_col, chat_col = st.columns([2, 1])
    with main_col:
        risks_tab, clauses_tab = st.tabs(["Risks", "Clauses"])
        with risks_tab:
            risk_map(ws.result)
        with clauses_tab:
            clause_insight(ws.result)
    with chat_col:
        counsel_panel(ws)
        meta = {
            "app": "JurisCompare",
            "version": config.app_version,
            "analysis_model": config.analysis_model,
            "chat_model": config.chat_model,
        }
        blob = build_analysis_json(ws.result, ws.transcript, meta, ws.baseline, ws.counterparty)
        st.download_button(
            "🗂️ Export JSON", data=blob, file_name="comparison_snapshot.json", mime="application/json", use_container_width=True,
        )

st.markdown("<div class='legal-footer'>Not legal advice. For informational purposes only.</div>", unsafe_allow_html=True)
