import streamlit as st
import json
import time
from dataclasses import asdict
from datetime import datetime
import pandas as pd
from config import settings
from generation_orchestrator import GenerationOrchestrator, GenerationState
from robot_schema import design_to_payload
from robot_service_client import RobotServiceClient
from view_state import QUICK_PROMPTS, ViewState, submit_prompt

st.set_page_config(
    page_title="RoboForge.AI",
    page_icon="🤖",
    layout="wide"
)

STATE_MESSAGES = {
    GenerationState.DESIGNING: "Generating design specifications...",
    GenerationState.DESIGN_READY: "Design ready.",
    GenerationState.DESIGN_FAILED: "Design generation failed.",
    GenerationState.IMAGING: "Rendering concept image...",
    GenerationState.IMAGE_READY: "Concept image ready.",
    GenerationState.IMAGE_FAILED: "Concept image unavailable, continuing without it.",
    GenerationState.COMPLETE: "Complete!",
}


@st.cache_resource
def get_service_client() -> RobotServiceClient:
    """One HTTP session for the whole Streamlit process"""
    return RobotServiceClient.from_settings(settings)


if 'view' not in st.session_state:
    st.session_state.view = ViewState.create(settings.telemetry_window)

view: ViewState = st.session_state.view

st.title("ROBOFORGE.AI")
st.markdown("""
Forge the future of robotics. Describe the robot you need and the AI generates
its specifications, component list, control code and a concept render.
""")


@st.fragment(run_every=settings.telemetry_interval_seconds)
def telemetry_panel():
    """Synthetic telemetry; ticks on its own interval while the page is open"""
    state: ViewState = st.session_state.view
    state.tick_if_due(time.monotonic(), settings.telemetry_interval_seconds)

    frame = pd.DataFrame([asdict(s) for s in state.telemetry]).set_index("time")
    latest = state.telemetry[-1]

    st.markdown("##### Telemetry Simulation")
    st.area_chart(frame[["torque"]], height=160)

    m1, m2, m3 = st.columns(3)
    m1.metric("TEMP", f"{latest.temp:.1f}°C")
    m2.metric("BATT", f"{int(latest.battery)}%")
    m3.metric("LOAD", f"{latest.torque:.0f} Nm")


col1, col2 = st.columns([2, 1])

with col1:
    st.subheader("Describe Your Robot")

    prompt = st.text_area(
        "Robot description",
        value=view.prompt,
        placeholder="e.g. hexapod lunar rover for cave exploration",
        height=100,
    )

    generate_button = st.button(
        "Generate Design",
        type="primary",
        disabled=view.loading,
        use_container_width=True
    )

    if generate_button:
        if not prompt.strip():
            st.error("Please describe the robot you want to build")
        else:
            status_text = st.empty()

            def update_status(state: GenerationState):
                status_text.text(STATE_MESSAGES.get(state, ""))

            orchestrator = GenerationOrchestrator(get_service_client(), on_state=update_status)
            try:
                with st.spinner("Forging your robot design..."):
                    applied = submit_prompt(view, orchestrator, prompt)
            finally:
                # runs are serialized per session
                view.loading = False

            status_text.empty()
            if applied and view.error is None:
                st.rerun()

    notice = view.pop_notice()
    if notice:
        st.success(notice)

    if view.error:
        st.error(view.error)

with col2:
    st.subheader("How It Works")
    st.markdown("""
    1. **Describe**: Type a short description of the robot
    2. **Design**: The AI drafts specs, components and control code
    3. **Render**: A concept image is generated when available
    4. **Iterate**: Refine the description and generate again
    """)

    if view.generation_count > 0:
        st.metric("Designs Generated", view.generation_count)

    telemetry_panel()


result = view.result
if result and result.design:
    design = result.design

    st.divider()

    col_preview, col_details = st.columns([1, 2])

    with col_preview:
        if result.image_url:
            st.image(result.image_url, caption=design.name, use_container_width=True)
        else:
            st.info("No concept image available for this design.")

        st.subheader(design.name)
        st.caption(design.purpose.upper())

    with col_details:
        tab_specs, tab_code, tab_components = st.tabs(["Specifications", "Control Logic", "Components"])

        with tab_specs:
            st.markdown(design.specifications)

        with tab_code:
            st.code(design.controlLogic)

        with tab_components:
            if not design.components:
                st.info("No components listed.")
            for component in design.components:
                st.markdown(f"**{component.name}** · `{component.type}`")
                st.caption(component.description)

        with st.expander("View JSON Output"):
            payload = design_to_payload(design)
            st.json(payload)

        st.download_button(
            label="Download JSON",
            data=json.dumps(payload, indent=2),
            file_name=f"robot_design_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json",
            mime="application/json",
            use_container_width=True
        )
else:
    st.divider()
    st.info("Awaiting input parameters. Describe a robot above to generate its design.")

    chip_cols = st.columns(len(QUICK_PROMPTS))
    for chip_col, tag in zip(chip_cols, QUICK_PROMPTS):
        chip_col.button(tag, key=f"quick_{tag}", on_click=view.use_quick_prompt, args=(tag,), use_container_width=True)

st.markdown("---")
st.markdown(
    '<div style="text-align: center; color: #666;">RoboForge.AI | Powered by Google Gemini</div>',
    unsafe_allow_html=True
)
