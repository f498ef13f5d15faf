"""
Fake News Detector
Paste an article and see how the offline-trained model scores it.
"""

import json

import streamlit as st
from dotenv import load_dotenv

from fake_news_detector import (
    FakeNewsDetectorError,
    InferenceService,
    Settings,
)

# Load environment variables
load_dotenv()

# Page configuration
st.set_page_config(
    page_title="Fake News Detector",
    page_icon="📰",
    layout="centered",
    initial_sidebar_state="expanded",
)

# Custom CSS
st.markdown(
    """
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: 700;
        color: #1E3A5F;
        margin-bottom: 0.5rem;
    }
    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }
    .verdict-card {
        border-radius: 10px;
        padding: 1.5rem;
        margin: 1rem 0;
        text-align: center;
    }
    .verdict-fake {
        border-left: 4px solid #dc3545;
        background-color: #fff5f5;
    }
    .verdict-real {
        border-left: 4px solid #28a745;
        background-color: #f5fff7;
    }
    .verdict-label {
        font-size: 2rem;
        font-weight: 700;
    }
</style>
""",
    unsafe_allow_html=True,
)


@st.cache_resource(show_spinner="Loading model assets...")
def get_service() -> InferenceService:
    """Load the model once per server process."""
    service = InferenceService(Settings.from_env())
    try:
        service.load()
    except FakeNewsDetectorError:
        pass  # surfaced in the sidebar through service.health()
    return service


def init_session_state():
    """Initialize session state variables."""
    if "result" not in st.session_state:
        st.session_state.result = None


def render_sidebar(service: InferenceService):
    """Render the sidebar with model status."""
    with st.sidebar:
        st.markdown("### ⚙️ Model")
        health = service.health()
        if service.is_ready:
            st.success(f"Ready ({health['vocabulary_size']:,} terms)")
            st.json(service.assets.summary())
        else:
            st.error(f"Model unavailable: {health['error']}")
            st.markdown("Check `FAKE_NEWS_DATA_DIR` in your `.env` file and restart.")

        st.markdown("---")
        st.markdown("### 🔒 Privacy")
        st.markdown("Text is scored in memory and **never stored**.")


def render_result(result: dict):
    """Render the verdict card for one classification."""
    is_fake = result["label"] == 1
    css = "verdict-fake" if is_fake else "verdict-real"
    icon = "🔴" if is_fake else "🟢"
    label = "Likely fake" if is_fake else "Likely real"
    st.markdown(
        f"""
    <div class="verdict-card {css}">
        <div class="verdict-label">{icon} {label}</div>
        <div>Probability of fake news: {result["probability"]:.1%}</div>
    </div>
    """,
        unsafe_allow_html=True,
    )
    st.progress(result["probability"])
    st.download_button(
        "📄 Download JSON",
        data=json.dumps(result, indent=2),
        file_name="fake_news_verdict.json",
        mime="application/json",
    )


def main():
    """Main application entry point."""
    init_session_state()
    service = get_service()
    render_sidebar(service)

    st.markdown('<p class="main-header">📰 Fake News Detector</p>', unsafe_allow_html=True)
    st.markdown(
        '<p class="sub-header">TF-IDF + logistic regression scoring of article text</p>',
        unsafe_allow_html=True,
    )

    text = st.text_area("Article text", height=250, placeholder="Paste the article body here...")

    if st.button("🔍 Check Article", type="primary", use_container_width=True,
                 disabled=not service.is_ready):
        try:
            st.session_state.result = service.classify(text).to_dict()
        except FakeNewsDetectorError as e:
            st.session_state.result = None
            st.error(f"❌ {e}")

    if st.session_state.result:
        st.markdown("---")
        render_result(st.session_state.result)


if __name__ == "__main__":
    main()
