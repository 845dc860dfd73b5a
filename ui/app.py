"""
Doodle Animator Studio UI
=========================

A small studio page for turning a prompt (and an optional reference image)
into a looping doodle GIF.

Architecture:
    - Generation and GIF assembly both run in the doodle animator service
    - This page only collects input and renders the returned frames + GIF
    - Canvas size, frame rate and model are configured in config.yaml, NOT here

Usage:
    streamlit run ui/app.py

Environment:
    DOODLE_API_URL: service HTTP root (default: http://localhost:8002)
"""

import base64
import os
from typing import List, Optional, Tuple

import requests
import streamlit as st

# =============================================================================
# Configuration
# =============================================================================

API_URL = os.getenv("DOODLE_API_URL", "http://localhost:8002")
MAX_REFERENCE_MB = 4
REQUEST_TIMEOUT_SECONDS = 180

# =============================================================================
# Page config
# =============================================================================

st.set_page_config(
    page_title="Doodle Animator",
    page_icon="✏️",
    layout="wide",
)

# =============================================================================
# Networking helpers
# =============================================================================

def fetch_service_root() -> Optional[dict]:
    """Get service info (includes generation_enabled)."""
    try:
        r = requests.get(API_URL, timeout=2)
        if r.status_code == 200:
            return r.json()
    except requests.RequestException:
        return None
    return None


def request_animation(prompt: str, reference: Optional[Tuple[str, bytes]]) -> Tuple[bool, dict]:
    """
    Ask the service to generate and assemble an animation.

    Returns:
        (ok, body) where body is the service's JSON response, or a
        synthetic error body when the service could not be reached
    """
    payload: dict = {"prompt": prompt}
    if reference is not None:
        mime_type, data = reference
        payload["reference_image"] = {
            "mimeType": mime_type,
            "data": base64.b64encode(data).decode("ascii"),
        }

    try:
        r = requests.post(f"{API_URL}/generate", json=payload, timeout=REQUEST_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        return False, {"message": f"Error generating animation: {e}"}

    try:
        body = r.json()
    except ValueError:
        body = {"message": f"Error generating animation: HTTP {r.status_code}"}

    if r.status_code != 200 and "message" not in body:
        # FastAPI validation errors carry "detail" instead
        body["message"] = f"Error generating animation: HTTP {r.status_code}"
    return r.status_code == 200, body


# =============================================================================
# Rendering helpers
# =============================================================================

def decode_data_url(url: str) -> Optional[bytes]:
    """Payload bytes of a base64 data: URL."""
    if not url.startswith("data:") or ";base64," not in url:
        return None
    return base64.b64decode(url.split(";base64,", 1)[1])


def render_frames(frames: List[str]) -> None:
    if not frames:
        st.info("No frames yet")
        return

    columns = st.columns(min(len(frames), 5))
    for i, url in enumerate(frames):
        data = decode_data_url(url)
        if data is None:
            continue
        with columns[i % len(columns)]:
            st.image(data, caption=f"Frame {i + 1}", use_container_width=True)


def render_output(result: Optional[dict]) -> None:
    if not result:
        st.info("No animation yet")
        return

    gif = decode_data_url(result.get("data_url", ""))
    if gif is None:
        st.warning("Animation payload missing")
        return

    st.image(gif, caption=f"{result.get('frame_count', 0)} frames", use_container_width=True)
    st.download_button(
        "⬇ Download GIF",
        data=gif,
        file_name=result.get("download_name", "animation_generated.gif"),
        mime=result.get("media_type", "image/gif"),
    )


# =============================================================================
# Main UI
# =============================================================================

def main():
    # ── Session state init ────────────────────────────────────────────────────
    if "result" not in st.session_state:
        st.session_state.result = None
    if "status" not in st.session_state:
        st.session_state.status = ""

    # ── Sidebar ───────────────────────────────────────────────────────────────
    with st.sidebar:
        st.header("Service")
        root_info = fetch_service_root()
        if root_info:
            st.success("🟢 Service Online")
            st.text(f"Model: {root_info.get('model', '-')}")
            if not root_info.get("generation_enabled"):
                st.warning("Generation disabled (API_KEY not set)")
        else:
            st.error("🔴 Service Offline")
        st.divider()
        st.text(f"API: {API_URL}")
        st.caption("Canvas size and frame rate are set in config.yaml, not in this UI.")

    # ── Input ─────────────────────────────────────────────────────────────────
    st.title("Doodle Animator")

    prompt = st.text_area(
        "Describe your animation",
        placeholder="a cat waving hello",
    )
    uploaded = st.file_uploader(
        "Reference image (optional)",
        type=["png", "jpg", "jpeg", "webp"],
    )

    reference: Optional[Tuple[str, bytes]] = None
    if uploaded is not None:
        data = uploaded.getvalue()
        if len(data) > MAX_REFERENCE_MB * 1024 * 1024:
            st.error(f"Image size exceeds {MAX_REFERENCE_MB}MB limit.")
        else:
            reference = (uploaded.type or "image/png", data)
            st.image(data, caption="Reference", width=160)

    if st.button("✨ Generate", type="primary"):
        if not prompt.strip():
            st.session_state.status = "Please enter a prompt."
        else:
            with st.spinner("Generating frames..."):
                ok, body = request_animation(prompt.strip(), reference)
            st.session_state.status = body.get("message", "")
            st.session_state.result = body if ok else None

    # ── Status line ───────────────────────────────────────────────────────────
    status = st.session_state.status
    if status == "Done!":
        st.success(status)
    elif status:
        st.error(status)

    # ── Results ───────────────────────────────────────────────────────────────
    result = st.session_state.result
    frames_tab, output_tab = st.tabs(["Frames", "Output"])
    with frames_tab:
        render_frames(result.get("frames", []) if result else [])
    with output_tab:
        render_output(result)


if __name__ == "__main__":
    main()
