"""
Streamlit Frontend for FinTrust

Institutional money transparency demo: upload financial exports,
verify they have not been altered, and explore how a budget flows
into departments and projects.

DESIGN PRINCIPLES:
1. Every upload and every check shows up in the verification log
2. Failures are shown, never hidden
3. The signature is a demo checksum, and the UI says so
"""

import asyncio
import logging
from pathlib import Path

import streamlit as st

from fintrust.audit import event_html
from fintrust.config import get_settings, validate_all_settings
from fintrust.graph import GraphConsistencyError
from fintrust.orchestrator import (
    BudgetFlow,
    RecordFlow,
    create_app_components,
    load_budget_file,
)


SAMPLE_BUDGET_PATH = Path(__file__).with_name("sample_budget.json")


# Page configuration
st.set_page_config(
    page_title="FinTrust",
    page_icon="🏛️",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for log entries
st.markdown("""
<style>
    .ok-box {
        padding: 8px 12px;
        background-color: #d4edda;
        border-radius: 8px;
        border-left: 5px solid #28a745;
        margin: 6px 0;
        font-size: 0.85em;
    }
    .err-box {
        padding: 8px 12px;
        background-color: #f8d7da;
        border-radius: 8px;
        border-left: 5px solid #dc3545;
        margin: 6px 0;
        font-size: 0.85em;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    logging.basicConfig(level=get_settings().app.effective_log_level)
    return create_app_components(budget=load_budget_file(SAMPLE_BUDGET_PATH))


def main():
    """Main application entry point."""
    record_flow, budget_flow, _ = get_components()

    st.sidebar.title("🏛️ FinTrust")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📤 Upload & Verify", "📊 Budget Explorer", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Upload a CSV or JSON export
        2. Click *Verify* on any record to re-check it
        3. Explore departments and projects

        *Demo only: signatures are checksums with a public tag,
        not real cryptographic signatures.*
        """
    )

    if page == "📤 Upload & Verify":
        render_upload_page(record_flow)
    elif page == "📊 Budget Explorer":
        render_budget_page(budget_flow)
    elif page == "⚙️ Settings":
        render_settings_page()

    render_verification_log(record_flow)


def render_upload_page(record_flow: RecordFlow):
    """Render the upload and verify page."""
    st.title("📤 Upload financial data")
    st.markdown(
        "Upload CSV or JSON exports from accounting systems. "
        "Each file gets a checksum so later changes can be detected."
    )

    uploaded_file = st.file_uploader(
        "Choose a file",
        type=get_settings().app.supported_extensions_list,
    )

    if uploaded_file and st.button("🔏 Ingest file", type="primary"):
        record, event = run_async(
            record_flow.upload(uploaded_file.name, uploaded_file.getvalue())
        )
        if record:
            st.success(f"Ingested {record.name} (sig: {record.signature[:12]}...)")
        else:
            st.error(f"Could not ingest {event.file}: {event.error}")

    st.markdown("### Uploaded records")
    records = record_flow.records()
    if not records:
        st.info("No uploads yet.")

    for record in records:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.markdown(f"**{record.name}**  \n`sig: {record.signature[:12]}...`")
        with col2:
            if st.button("Verify", key=f"verify_{record.id}"):
                event = run_async(record_flow.verify(record))
                if event.ok:
                    st.success("Signature matches")
                else:
                    st.error("Signature mismatch")


def render_budget_page(budget_flow: BudgetFlow):
    """Render the budget explorer page."""
    budget = budget_flow.budget

    st.title("📊 Budget Explorer")
    st.markdown(f"**Total budget:** ₹{budget.total:,}")

    col1, col2 = st.columns(2)

    with col1:
        st.markdown("#### Departments")
        dept = st.selectbox(
            "Department",
            options=[None] + [c.id for c in budget.breakdown],
            format_func=lambda x: "All departments" if x is None else x,
        )
        summary = budget_flow.summary()
        st.dataframe([
            {
                "Department": c.category,
                "Allocated": float(c.allocated),
                "Assigned to projects": float(c.assigned_to_projects),
                "Projects": c.project_count,
            }
            for c in summary.categories
        ])
        if summary.unallocated:
            st.caption(f"Unallocated: ₹{summary.unallocated:,}")

    with col2:
        st.markdown("#### Projects")
        for project in budget_flow.projects(dept):
            with st.expander(f"{project.id} • ₹{project.amount:,}"):
                st.markdown(f"Dept: {project.dept} • Vendor: {project.vendor}")
                st.dataframe([
                    {
                        "Date": tx.date,
                        "Notes": tx.notes,
                        "Tx id": tx.id,
                        "Amount": float(tx.amount),
                    }
                    for tx in project.txs
                ])
                if st.button("Quick verify", key=f"quick_{project.id}"):
                    event = run_async(budget_flow.quick_verify_project(project.id))
                    st.caption(f"Fingerprint: {event.signature[:12]}..." if event.ok else event.error)

    st.markdown("#### Flow")
    try:
        graph = budget_flow.flow_graph()
    except GraphConsistencyError as e:
        st.error(f"No diagram available: {e}")
        return

    names = graph.node_names
    st.dataframe([
        {"From": names[link.source], "To": names[link.target], "Amount": float(link.value)}
        for link in graph.links
    ])
    with st.expander("Graph data"):
        st.json(graph.to_dict())


def render_verification_log(record_flow: RecordFlow):
    """Render the verification log in the sidebar."""
    st.sidebar.markdown("---")
    st.sidebar.markdown("### Verification log")

    events = record_flow.verification_log(limit=get_settings().app.audit_display_limit)
    if not events:
        st.sidebar.caption("Nothing logged yet.")

    for event in events:
        st.sidebar.markdown(event_html(event), unsafe_allow_html=True)


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    status = validate_all_settings()
    if status.get("app", False):
        st.success("✅ Application settings loaded")
    else:
        st.error(f"❌ {status.get('app_error', 'Not configured')}")

    settings = get_settings().app
    st.markdown(f"""
    - **Environment:** {settings.app_environment}
    - **Max upload size:** {settings.max_upload_size_mb} MB
    - **Accepted files:** {", ".join(settings.supported_extensions_list)}
    - **Log level:** {settings.effective_log_level}
    """)
    st.markdown(
        "Settings come from `FINTRUST_*` environment variables or a `.env` file. "
        "See `.env.example`."
    )


if __name__ == "__main__":
    main()
