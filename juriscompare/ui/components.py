from __future__ import annotations
import base64
import html
import streamlit as st
import pandas as pd
from juriscompare.analysis.models import AnalysisResult, ClauseComparison, Risk
from juriscompare.capture.camera import StreamlitCameraStream
from juriscompare.diff.word_diff import iter_diff, render_html
from juriscompare.session.workspace import Workspace
from juriscompare.utils.config import AppConfig
from juriscompare.utils.types import ImageDocument, Slot, TextDocument

PRIMARY_COLOR = "#4F46E5"  # indigo
SEVERITY_COLORS = {"critical": "#DC2626", "high": "#EA580C", "medium": "#D97706", "low": "#2563EB"}

SLOT_LABELS = {
    Slot.BASELINE: ("Baseline Document", "The reference or original text"),
    Slot.COUNTERPARTY: ("Counterparty Version", "The new or revised draft"),
}

_CSS_TEMPLATE = r"""
<style>
html, body, [class*="css"]  { font-family: 'Inter', 'Segoe UI', sans-serif; }
section.main > div { padding-top: 1rem; }
div[data-testid="stSidebar"] h1, div[data-testid="stSidebar"] h2, div[data-testid="stSidebar"] h3 { color: __PRIMARY__; }
.brand {display:flex;align-items:center;gap:.55rem;margin:.2rem 0 1rem 0;}
.brand-badge {width:38px;height:38px;display:flex;align-items:center;justify-content:center;background:linear-gradient(135deg,__PRIMARY__,#818cf8);color:#fff;font-weight:700;border-radius:12px;font-size:.9rem;}
.status-grid {display:grid;grid-template-columns:repeat(2,minmax(0,1fr));gap:6px;margin-top:.25rem;}
.status-pill {border:1px solid #e2e8f0;padding:6px 8px;border-radius:10px;font-size:.55rem;text-transform:uppercase;display:flex;flex-direction:column;gap:2px;}
.status-pill span.value {font-size:.74rem;font-weight:600;letter-spacing:0;}
.metric { border:1px solid #e2e8f0; border-radius:14px; padding:.8rem .95rem; height:100%; }
.metric h4 { font-size:.62rem; letter-spacing:1.5px; text-transform:uppercase; opacity:.6; margin:0 0 6px 0; }
.metric p { font-weight:700; margin:0; }
.metric.highlight { background:__PRIMARY__; color:#fff; border-color:__PRIMARY__; }
.metric.danger { background:#fef2f2; color:#b91c1c; border-color:#fee2e2; }
.metric p.big { font-size:1.6rem; }
.metric p.small { font-size:.8rem; line-height:1.3; }
h2.section-title { position:relative; padding-left:12px; font-size:1.05rem; margin-top:1rem; }
h2.section-title:before { content:""; position:absolute; left:0; top:4px; width:5px; height:70%; background:linear-gradient(180deg,__PRIMARY__,#818cf8); border-radius:4px; }
.risk-card { border:1px solid; border-radius:12px; padding:.7rem .85rem; margin-bottom:.6rem; }
.risk-cat { font-size:.55rem; letter-spacing:.5px; text-transform:uppercase; padding:2px 6px; border-radius:10px; border:1px solid currentColor; }
.risk-title { font-weight:700; font-size:.8rem; text-transform:uppercase; margin-top:6px; }
.risk-desc { font-size:.72rem; font-style:italic; opacity:.85; margin-top:4px; }
.risk-impact { font-size:.68rem; margin-top:6px; padding-top:6px; border-top:1px solid rgba(0,0,0,.08); }
.clause-card { border:1px solid #e2e8f0; border-radius:14px; padding:.8rem .95rem; margin-bottom:.8rem; }
.clause-head { display:flex; gap:.5rem; align-items:center; }
.cat-tag { font-size:.55rem; letter-spacing:.5px; text-transform:uppercase; padding:2px 6px; border-radius:6px; background:__PRIMARY__; color:#fff; }
.clause-text { font-family:Georgia, serif; font-size:.74rem; line-height:1.45; padding:.6rem .7rem; border-radius:10px; border:1px solid #e2e8f0; }
.clause-label { font-size:.55rem; letter-spacing:1.5px; text-transform:uppercase; opacity:.55; margin:.4rem 0 .2rem 0; }
mark.diff-added { background:#dcfce7; color:#14532d; font-weight:700; padding:0 2px; border-radius:3px; }
.verdict { background:#312e81; color:#fff; border-radius:10px; padding:.6rem .75rem; margin-top:.6rem; font-size:.78rem; }
.verdict span { display:block; font-size:.55rem; letter-spacing:1.5px; text-transform:uppercase; color:#a5b4fc; margin-bottom:3px; }
.chat-user { background:__PRIMARY__; color:#fff; padding:8px 12px; border-radius:12px 0 12px 12px; margin:4px 0 4px 15%; font-size:.8rem; }
.chat-model { background:#f1f5f9; padding:8px 12px; border-radius:0 12px 12px 12px; margin:4px 15% 4px 0; font-size:.8rem; }
.legal-footer { text-align:center; padding:.75rem 0 2rem 0; font-size:.65rem; opacity:.6; }
</style>
"""

GLOBAL_CSS = _CSS_TEMPLATE.replace("__PRIMARY__", PRIMARY_COLOR)


def _esc(text: str) -> str:
    return html.escape(text or "")


def bump_doc_version():
    """Force document text areas to re-read their slot after an external change."""
    st.session_state["doc_version"] = st.session_state.get("doc_version", 0) + 1


def forget_uploads(state=None):
    """Drop the per-slot upload markers so a re-uploaded file is read again."""
    state = st.session_state if state is None else state
    for slot in Slot:
        state.pop(f"uploaded_{slot.value}", None)


def sidebar(config: AppConfig, ws: Workspace):
    st.markdown(GLOBAL_CSS, unsafe_allow_html=True)
    st.sidebar.markdown(
        "<div class='brand'><div class='brand-badge'>JC</div><div><div style='font-weight:700;font-size:.85rem;'>JurisCompare</div><div style='font-size:.55rem;opacity:.6;'>Compare • Risk • Counsel</div></div></div>",
        unsafe_allow_html=True,
    )
    risks = len(ws.result.risks) if ws.result else 0
    clauses = len(ws.result.clause_analysis) if ws.result else 0
    st.sidebar.markdown(
        f"<div class='status-grid'>"
        f"<div class='status-pill'><span>Analysis</span><span class='value'>{_esc(config.analysis_model)}</span></div>"
        f"<div class='status-pill'><span>Counsel</span><span class='value'>{_esc(config.chat_model)}</span></div>"
        f"<div class='status-pill'><span>Risks</span><span class='value'>{risks}</span></div>"
        f"<div class='status-pill'><span>Clauses</span><span class='value'>{clauses}</span></div>"
        f"</div>",
        unsafe_allow_html=True,
    )
    if not config.has_api_key:
        st.sidebar.warning("GOOGLE_API_KEY is not set; analysis will fail until it is configured.")
    st.sidebar.caption("Not legal advice. Nothing is stored beyond this session.")


def document_input(ws: Workspace, slot: Slot):
    title, subtitle = SLOT_LABELS[slot]
    doc = ws.document(slot)
    st.markdown(f"#### {title}")
    st.caption(subtitle)
    if isinstance(doc, ImageDocument):
        st.image(base64.b64decode(doc.data), caption="Document Captured", use_container_width=True)
        if st.button("Retake or Edit", key=f"retake_{slot.value}"):
            ws.clear_document(slot)
            bump_doc_version()
            st.rerun()
    else:
        current = doc.text if isinstance(doc, TextDocument) else ""
        text = st.text_area(
            "Contract text", value=current, height=260, key=f"text_{slot.value}_{st.session_state.get('doc_version', 0)}",
            placeholder="Paste contract text here...", label_visibility="collapsed",
        )
        if text != current:
            ws.set_document(slot, TextDocument(text=text) if text.strip() else None)
    col_file, col_cam = st.columns([3, 1])
    with col_file:
        uploaded = st.file_uploader(
            "Upload file", type=["txt", "md", "pdf", "doc", "docx"], key=f"file_{slot.value}_{st.session_state.get('doc_version', 0)}", label_visibility="collapsed",
        )
        marker = f"uploaded_{slot.value}"
        if uploaded is not None and st.session_state.get(marker) != uploaded.file_id:
            st.session_state[marker] = uploaded.file_id
            ws.upload_file(slot, uploaded)
            bump_doc_version()
            st.rerun()
    with col_cam:
        if st.button("📷 Scan", key=f"scan_{slot.value}", use_container_width=True, help="Scan with camera"):
            ws.open_camera(slot)
            st.rerun()


def camera_panel(ws: Workspace):
    if ws.camera_target is None:
        return
    title, _ = SLOT_LABELS[ws.camera_target]
    st.markdown(f"<h2 class='section-title'>Capture {title} Page</h2>", unsafe_allow_html=True)
    snapshot = st.camera_input("Capture Document Page", key=f"camera_{ws.camera_target.value}")
    cols = st.columns([1, 1])
    with cols[0]:
        if st.button("Use Photo", type="primary", use_container_width=True, disabled=snapshot is None):
            ws.capture_photo(StreamlitCameraStream(snapshot))
            bump_doc_version()
            st.rerun()
    with cols[1]:
        if st.button("Cancel", use_container_width=True):
            ws.close_camera()
            st.rerun()


def _metric(label: str, value: str, kind: str = "", size: str = "big") -> str:
    return f"<div class='metric {kind}'><h4>{_esc(label)}</h4><p class='{size}'>{_esc(value)}</p></div>"


def stat_cards(result: AnalysisResult):
    cols = st.columns([2, 1, 1, 1])
    with cols[0]:
        st.markdown(_metric("Executive Summary", result.summary, size="small"), unsafe_allow_html=True)
    with cols[1]:
        st.markdown(_metric("Recommendation", result.recommendation, "highlight", "small"), unsafe_allow_html=True)
    with cols[2]:
        st.markdown(_metric("Critical Issues", str(len(result.critical_changes)), "danger"), unsafe_allow_html=True)
    with cols[3]:
        st.markdown(_metric("Clauses Analyzed", str(len(result.clause_analysis))), unsafe_allow_html=True)
    if result.critical_changes:
        with st.expander("Critical changes", expanded=False):
            st.markdown("\n".join(f"- {c}" for c in result.critical_changes))


def risk_tile(risk: Risk):
    color = SEVERITY_COLORS.get(risk.severity, PRIMARY_COLOR)
    st.markdown(
        f"""
        <div class='risk-card' style='border-color:{color};color:{color};'>
          <span class='risk-cat'>{_esc(risk.category)}</span>
          <span style='float:right;font-size:.6rem;font-weight:700;text-transform:uppercase;'>{risk.severity}</span>
          <div class='risk-title'>{_esc(risk.title)}</div>
          <div class='risk-desc'>"{_esc(risk.description)}"</div>
          <div class='risk-impact'><strong>Estimated impact:</strong> {_esc(risk.impact)}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def risk_map(result: AnalysisResult):
    st.markdown("<h2 class='section-title'>Legal Risk Map</h2>", unsafe_allow_html=True)
    if not result.risks:
        st.info("No risks reported.")
        return
    counts = pd.DataFrame([result.severity_counts()], index=["risks"])
    st.dataframe(counts, use_container_width=True)
    for r in result.risks_by_severity():
        risk_tile(r)


def clause_card(clause: ClauseComparison):
    diff_html = render_html(iter_diff(clause.doc1_text, clause.doc2_text))
    st.markdown(
        f"""
        <div class='clause-card'>
          <div class='clause-head'>
            <span class='cat-tag'>{_esc(clause.category)}</span>
            <strong>{_esc(clause.clause_title)}</strong>
          </div>
          <div class='clause-label'>Baseline Draft</div>
          <div class='clause-text'>{_esc(clause.doc1_text)}</div>
          <div class='clause-label'>Revised Version</div>
          <div class='clause-text'>{diff_html}</div>
          <div class='verdict'><span>AI Counsel Verdict</span>{_esc(clause.significance)}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )


def clause_insight(result: AnalysisResult):
    st.markdown("<h2 class='section-title'>Semantic Diff & Clause Insight</h2>", unsafe_allow_html=True)
    if not result.clause_analysis:
        st.info("No clause comparisons reported.")
        return
    categories = sorted({c.category for c in result.clause_analysis})
    chosen = st.multiselect("Category", categories, default=categories, label_visibility="collapsed")
    shown = 0
    for clause in result.clause_analysis:
        if clause.category not in chosen:
            continue
        shown += 1
        clause_card(clause)
    st.caption(f"{shown} clause(s) shown")


def counsel_panel(ws: Workspace):
    st.markdown("<h2 class='section-title'>Interactive Counsel</h2>", unsafe_allow_html=True)
    if ws.chat is None:
        st.warning("Counsel is unavailable for this analysis.")
        return
    st.caption("Ask me about specific risks, liability caps, or any hidden obligations in these drafts.")
    for msg in ws.transcript:
        css = "chat-user" if msg.role == "user" else "chat-model"
        st.markdown(f"<div class='{css}'>{_esc(msg.text)}</div>", unsafe_allow_html=True)
    with st.form("counsel_form", clear_on_submit=True):
        question = st.text_input("Ask Juris AI...", placeholder="e.g., Is the indemnity capped?", label_visibility="collapsed")
        submitted = st.form_submit_button("Send", use_container_width=True, disabled=ws.is_typing)
    if submitted and question:
        with st.spinner("Counsel is typing..."):
            ws.send_message(question)
        st.rerun()
