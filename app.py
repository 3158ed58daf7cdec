import os
import logging
import streamlit as st
import pandas as pd

# Must be first Streamlit call
st.set_page_config(page_title="ChangeGate", layout="wide")

# ----------------------------
# Imports (engine)
# ----------------------------
from change_engine.classifier import classify_change, parse_answer
from change_engine.errors import ChangeEngineError, InvalidInputError, PolicyConfigError
from change_engine.explain import explain_assessment
from change_engine.guidance import category_note, scoring_guide, tier_authority
from change_engine.models import ChangeCategory, RiskTier
from change_engine.pdf_report import write_pdf_report
from change_engine.policy import DEFAULT_POLICY
from change_engine.policy_store import POLICY_PATH, load_policy
from change_engine.record import build_change_record, new_record_id, now_iso
from change_engine.scoring import DEFAULT_SLIDER_VALUE, ENGINE_VERSION, assess_risk, scores_from_mapping
from change_engine.workflow import resolve_path

REPORTS_DIR = "reports"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("changegate.app")

os.makedirs(REPORTS_DIR, exist_ok=True)

# ----------------------------
# Session state
# ----------------------------
if "category" not in st.session_state:
    st.session_state.category = None
if "assessment" not in st.session_state:
    st.session_state.assessment = None

# ----------------------------
# Styling
# ----------------------------
st.markdown(
    """
<style>
.block-container { padding-top: 1.1rem; padding-bottom: 2rem; }
h1, h2, h3 { letter-spacing: -0.02em; }
.score-big { font-size: 2.4rem; font-weight: 800; margin: 0.2rem 0; }
</style>
""",
    unsafe_allow_html=True,
)

# ----------------------------
# Helpers
# ----------------------------
CATEGORY_TONES = {
    ChangeCategory.STANDARD: "good",
    ChangeCategory.NORMAL: "info",
    ChangeCategory.EMERGENCY: "bad",
}
TIER_TONES = {
    RiskTier.LOW: "good",
    RiskTier.MEDIUM: "warn",
    RiskTier.HIGH: "bad",
}


def badge(text: str, tone: str = "neutral"):
    tones = {
        "neutral": ("#111827", "#E5E7EB"),
        "good": ("#065F46", "#D1FAE5"),
        "warn": ("#92400E", "#FEF3C7"),
        "bad": ("#7F1D1D", "#FEE2E2"),
        "info": ("#1E3A8A", "#DBEAFE"),
    }
    fg, bg = tones.get(tone, tones["neutral"])
    st.markdown(
        f"""
        <span style="
            display:inline-block;
            padding:0.25rem 0.55rem;
            border-radius:999px;
            font-size:0.80rem;
            font-weight:600;
            color:{fg};
            background:{bg};
            border:1px solid rgba(0,0,0,0.06);
        ">{text}</span>
        """,
        unsafe_allow_html=True,
    )


def get_policy():
    try:
        return load_policy(POLICY_PATH)
    except PolicyConfigError as e:
        logger.error(f"Falling back to built-in policy: {e}")
        st.error(f"Custom policy at {POLICY_PATH} could not be loaded ({e}). Using the built-in policy.")
        return DEFAULT_POLICY


def reset_results():
    st.session_state.category = None
    st.session_state.assessment = None


def render_approval_path(steps):
    st.subheader("Approval Path")
    if not steps:
        st.warning("No approval steps are defined for this change in the active policy.")
        return
    for i, step in enumerate(steps, start=1):
        st.write(f"{i}. {step}")


def render_pdf_download(record: dict):
    if st.button("Generate PDF change record", key="btn_pdf"):
        path = write_pdf_report(f"{REPORTS_DIR}/{record['record_id']}.pdf", record)
        with open(path, "rb") as f:
            st.download_button(
                "Download PDF",
                data=f.read(),
                file_name=f"ChangeGate_{record['record_id']}.pdf",
                mime="application/pdf",
                key="dl_pdf",
            )


# ----------------------------
# Pages
# ----------------------------
def page_classify(policy):
    st.subheader("1. Classify the change")

    with st.form("change_form"):
        title = st.text_input("Change title (optional)", key="change_title")
        service_down = st.radio(
            "Is the service currently down or critically degraded?",
            ["yes", "no"],
            index=None,
            horizontal=True,
        )
        pre_approved = st.radio(
            "Is this a pre-approved (standard) change model?",
            ["yes", "no"],
            index=None,
            horizontal=True,
        )
        submitted = st.form_submit_button("Classify")

    if submitted:
        reset_results()
        try:
            st.session_state.category = classify_change(
                parse_answer(service_down, "service-down answer"),
                parse_answer(pre_approved, "pre-approved answer"),
            )
        except InvalidInputError:
            st.warning("Please answer both yes/no questions before submitting.")
            return

    category = st.session_state.category
    if category is None:
        return

    st.markdown("---")
    st.subheader("Classification")
    badge(category.value, CATEGORY_TONES.get(category, "neutral"))
    st.caption(category_note(category))

    if category != ChangeCategory.NORMAL:
        steps = resolve_path(category, None, policy=policy)
        render_approval_path(steps)
        record = build_change_record(
            category,
            steps,
            title=title,
            policy=policy,
            record_id=new_record_id(),
            timestamp_utc=now_iso(),
        )
        render_pdf_download(record)
        return

    st.markdown("---")
    st.subheader("2. Score the risk dimensions")
    st.caption("1 = lowest risk, 5 = highest risk. Hover a label for its anchors.")

    values = {}
    for dim in policy.dimensions:
        values[dim.id] = st.slider(
            dim.label,
            min_value=policy.min_score,
            max_value=policy.max_score,
            value=DEFAULT_SLIDER_VALUE,
            step=1,
            key=f"slider_{dim.id}",
            help=f"{dim.low_description}\n\n{dim.high_description}",
        )

    if st.button("Assess Risk", key="btn_assess"):
        try:
            st.session_state.assessment = assess_risk(scores_from_mapping(values, policy), policy)
        except ChangeEngineError as e:
            st.error(str(e))
            return

    assessment = st.session_state.assessment
    if assessment is None:
        return

    st.markdown("---")
    st.subheader("Risk Score")
    st.markdown(f'<div class="score-big">{assessment.display_score}</div>', unsafe_allow_html=True)
    badge(f"Risk Tier: {assessment.tier.value}", TIER_TONES.get(assessment.tier, "neutral"))
    st.caption(f"Approval authority: {tier_authority(assessment.tier)}")

    explanation = explain_assessment(assessment.scores, policy)
    if explanation.get("highest_dimensions"):
        st.markdown("**Highest-risk dimensions**")
        for item in explanation["highest_dimensions"]:
            st.write(f"- {item.get('label')}: {item.get('score')}")

    steps = resolve_path(category, assessment.tier, policy=policy)
    render_approval_path(steps)

    record = build_change_record(
        category,
        steps,
        assessment=assessment,
        explanation=explanation,
        title=title,
        policy=policy,
        record_id=new_record_id(),
        timestamp_utc=now_iso(),
    )
    render_pdf_download(record)


def page_guide(policy):
    st.subheader("Risk scoring guide")
    st.caption(f"Policy version {policy.version} • Engine {ENGINE_VERSION}")
    st.dataframe(pd.DataFrame(scoring_guide(policy)), hide_index=True, use_container_width=True)

    st.subheader("Risk tiers")
    st.write(f"- **Low** (score ≤ {policy.low_max}): {tier_authority(RiskTier.LOW)}")
    st.write(f"- **Medium** ({policy.low_max} < score ≤ {policy.medium_max}): {tier_authority(RiskTier.MEDIUM)}")
    st.write(f"- **High** (score > {policy.medium_max}): {tier_authority(RiskTier.HIGH)}")


# ----------------------------
# Main
# ----------------------------
st.title("ChangeGate")
st.caption("Classify a change request and get the approval workflow it requires.")

policy = get_policy()

tab_classify, tab_guide = st.tabs(["Classify", "Scoring guide"])
with tab_classify:
    page_classify(policy)
with tab_guide:
    page_guide(policy)
