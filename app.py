import streamlit as st

# Page config - MUST be first Streamlit command
st.set_page_config(
    page_title="Meeting Scribe",
    layout="wide"
)

import hashlib
import logging

# Import from scribe modules
from scribe.config import (
    DEFAULT_MODEL,
    MAX_AUDIO_SIZE_MB,
    UI_HISTORY_PAGE_SIZE,
    UI_TEXT_AREA_HEIGHT,
    UI_TRANSCRIPT_HEIGHT,
    SessionKey,
    load_settings,
)
from scribe.auth import check_login, get_client, logout
from scribe.database import get_transcription_by_id, get_user_transcriptions, meeting_title
from scribe.insights import (
    analyze_transcript,
    ask_about_meeting,
    export_to_markdown,
    extract_action_items_llm,
    summarize_transcript,
)
from scribe.llm import get_available_models, init_ai_clients
from scribe.logging_setup import setup_logging
from scribe.notices import Notice
from scribe.processing import DEMO_TRANSCRIPT, GatewayClient, process_recording
from scribe.utils import format_created_at, format_size

logger = logging.getLogger(__name__)


def read_secrets() -> dict:
    try:
        return dict(st.secrets)
    except Exception:
        # No secrets.toml; settings come from the environment alone
        return {}


@st.cache_resource
def get_settings():
    settings = load_settings(read_secrets())
    setup_logging(settings.log_level)
    return settings


@st.cache_resource
def get_ai_clients(_settings):
    return init_ai_clients(_settings)


settings = get_settings()

# Gate the entire app
if not check_login(settings):
    st.stop()

client = get_client(settings)
ai_clients = get_ai_clients(settings)
gateway = GatewayClient(settings.process_audio_url, api_key=settings.supabase_anon_key)
user_id = st.session_state[SessionKey.USER_ID]

# ============== Session State ==============

defaults = {
    SessionKey.TRANSCRIPTION: "",
    SessionKey.TRANSCRIPTION_SUMMARY: None,
    SessionKey.TRANSCRIPTION_ACTIONS: None,
    SessionKey.USED_DEMO_DATA: False,
    SessionKey.SELECTED_TRANSCRIPTION: None,
    SessionKey.SELECTED_MODEL: DEFAULT_MODEL,
    SessionKey.CHAT_HISTORY: [],
    SessionKey.AI_SUMMARY: None,
    SessionKey.AI_ACTIONS: None,
    SessionKey.LAST_AUDIO_DIGEST: None,
}
for key, value in defaults.items():
    if key not in st.session_state:
        st.session_state[key] = value

# Get available models (based on configured API keys)
available_models = get_available_models(ai_clients)


# ============== Helpers ==============

def show_notice(notice: Notice):
    st.toast(f"**{notice.title}**  \n{notice.description}", icon="⚠️" if notice.is_error else "ℹ️")


def set_transcript(text: str, summary=None, action_items=None, demo: bool = False):
    """Replace the transcript being viewed and reset everything derived from it."""
    st.session_state[SessionKey.TRANSCRIPTION] = text
    st.session_state[SessionKey.TRANSCRIPTION_SUMMARY] = summary
    st.session_state[SessionKey.TRANSCRIPTION_ACTIONS] = action_items
    st.session_state[SessionKey.USED_DEMO_DATA] = demo
    st.session_state[SessionKey.CHAT_HISTORY] = []
    st.session_state[SessionKey.AI_SUMMARY] = None
    st.session_state[SessionKey.AI_ACTIONS] = None


def handle_recording(audio_bytes: bytes, content_type: str):
    delivered = {}

    def on_transcription_ready(text: str):
        delivered["text"] = text

    def on_fallback(category):
        delivered["fallback"] = category

    with st.spinner("Transcribing your recording..."):
        result = process_recording(
            client,
            gateway,
            audio_bytes,
            content_type,
            user_id,
            on_transcription_ready=on_transcription_ready,
            on_fallback=on_fallback,
            on_notice=show_notice,
        )

    if "text" not in delivered:
        return
    set_transcript(
        delivered["text"],
        summary=result.summary if result else None,
        action_items=result.action_items if result else None,
        demo="fallback" in delivered,
    )
    st.session_state[SessionKey.SELECTED_TRANSCRIPTION] = None


# ============== Top Navigation ==============

st.markdown("#### Meeting Scribe")
nav_cols = st.columns([3, 2, 1])
with nav_cols[0]:
    st.caption(f"Signed in as {st.session_state.get(SessionKey.USER_EMAIL, '')}")
with nav_cols[1]:
    if available_models:
        st.session_state[SessionKey.SELECTED_MODEL] = st.selectbox(
            "Model",
            available_models,
            index=available_models.index(st.session_state[SessionKey.SELECTED_MODEL])
            if st.session_state[SessionKey.SELECTED_MODEL] in available_models else 0,
            key="nav_model",
            label_visibility="collapsed"
        )
with nav_cols[2]:
    if st.button("Sign out", use_container_width=True, icon=":material/logout:"):
        logout()
        st.rerun()

# ============== History ==============

with st.sidebar:
    st.markdown("### Past meetings")
    try:
        history = get_user_transcriptions(client, user_id, limit=UI_HISTORY_PAGE_SIZE)
    except Exception:
        logger.warning("Could not load transcription history", exc_info=True)
        history = []
        st.caption("History is unavailable right now.")

    if not history:
        st.caption("No saved meetings yet.")
    for row in history:
        label = f"{row.get('title') or 'Untitled'}  \n{format_created_at(row.get('created_at'))}"
        if st.button(label, key=f"history_{row['id']}", use_container_width=True):
            selected = get_transcription_by_id(client, row["id"])
            set_transcript(selected["content"], selected.get("summary"), selected.get("action_items"))
            st.session_state[SessionKey.SELECTED_TRANSCRIPTION] = selected["id"]
            st.rerun()

# ============== Record ==============

st.markdown("### Record a meeting")
st.caption(f"Recordings up to {MAX_AUDIO_SIZE_MB}MB are transcribed and saved to your account.")

record_col, demo_col = st.columns([4, 1])
with record_col:
    audio = st.audio_input("Record", label_visibility="collapsed")
with demo_col:
    if st.button("Load demo", use_container_width=True, icon=":material/science:"):
        set_transcript(DEMO_TRANSCRIPT, demo=True)
        st.session_state[SessionKey.SELECTED_TRANSCRIPTION] = None
        st.rerun()

if audio is not None:
    audio_bytes = audio.getvalue()
    digest = hashlib.sha256(audio_bytes).hexdigest()
    # Streamlit reruns the script on every interaction; process each recording once
    if digest != st.session_state[SessionKey.LAST_AUDIO_DIGEST]:
        st.session_state[SessionKey.LAST_AUDIO_DIGEST] = digest
        st.caption(f"Recording size: {format_size(len(audio_bytes))}")
        handle_recording(audio_bytes, audio.type or "audio/wav")

# ============== Analysis ==============

transcript = st.session_state[SessionKey.TRANSCRIPTION]
if not transcript:
    st.info("Record a meeting or load the demo to see the transcript and analysis.")
    st.stop()

if st.session_state[SessionKey.USED_DEMO_DATA]:
    st.warning(
        "Showing sample data. Real transcription was unavailable, so this transcript was generated "
        "for demonstration purposes.",
        icon=":material/science:",
    )

analysis = analyze_transcript(transcript)
model = st.session_state[SessionKey.SELECTED_MODEL]

tab1, tab2, tab3, tab4, tab5, tab6 = st.tabs([
    ":material/description: Transcript",
    ":material/summarize: Summary",
    ":material/task_alt: Action Items",
    ":material/checklist: To-Do",
    ":material/lightbulb: Insights",
    ":material/forum: Q&A",
])

with tab1:
    if analysis["speakers"]:
        st.caption("Speakers: " + ", ".join(analysis["speakers"]))
    st.text_area("Transcript", transcript, height=UI_TRANSCRIPT_HEIGHT, disabled=True, label_visibility="collapsed")

    title = meeting_title()
    md_content = export_to_markdown(
        title,
        transcript,
        summary=st.session_state[SessionKey.AI_SUMMARY] or st.session_state[SessionKey.TRANSCRIPTION_SUMMARY],
        action_items=st.session_state[SessionKey.AI_ACTIONS]
        or st.session_state[SessionKey.TRANSCRIPTION_ACTIONS]
        or analysis["action_items"],
        insights=analysis["insights"],
    )
    st.download_button(
        "Download Markdown",
        md_content,
        file_name=f"{title.replace(' ', '_').replace('/', '-')}.md",
        mime="text/markdown",
        use_container_width=True,
        icon=":material/file_download:",
    )

with tab2:
    saved_summary = st.session_state[SessionKey.TRANSCRIPTION_SUMMARY]
    if st.session_state[SessionKey.AI_SUMMARY]:
        st.markdown(st.session_state[SessionKey.AI_SUMMARY])
    elif saved_summary:
        st.markdown(saved_summary)
    else:
        st.markdown(analysis["summary"])
        st.caption("Opening of the conversation. Generate an AI summary for a full overview.")

    if available_models:
        if st.button("Generate AI summary", icon=":material/auto_awesome:"):
            with st.spinner("Summarizing..."):
                try:
                    st.session_state[SessionKey.AI_SUMMARY] = summarize_transcript(transcript, model, ai_clients)
                except Exception as e:
                    logger.warning("Summary generation failed", exc_info=True)
                    st.error(f"Summary failed: {e}")
                else:
                    st.rerun()
    else:
        st.caption("Configure an LLM API key to enable AI summaries.")

with tab3:
    ai_actions = st.session_state[SessionKey.AI_ACTIONS] or st.session_state[SessionKey.TRANSCRIPTION_ACTIONS]
    if ai_actions:
        for item in ai_actions:
            st.markdown(f"- {item}")
    elif analysis["action_items"]:
        for item in analysis["action_items"]:
            st.markdown(f"- **{item['speaker']}**: {item['text']}")
    else:
        st.caption("No action items identified.")

    if available_models:
        if st.button("Extract with AI", icon=":material/auto_awesome:"):
            with st.spinner("Extracting action items..."):
                try:
                    st.session_state[SessionKey.AI_ACTIONS] = extract_action_items_llm(transcript, model, ai_clients)
                except Exception as e:
                    logger.warning("Action item extraction failed", exc_info=True)
                    st.error(f"Extraction failed: {e}")
                else:
                    st.rerun()

with tab4:
    todo_list = analysis["todo_list"]
    if not todo_list:
        st.caption("Nothing to do yet.")
    for idx, todo in enumerate(todo_list):
        st.checkbox(f"{todo['task']} ({todo['assignee']})", value=todo["completed"], key=f"todo_{idx}")

with tab5:
    st.markdown(analysis["insights"])

with tab6:
    st.markdown("#### Ask Questions About This Meeting")
    if not available_models:
        st.caption("Configure an LLM API key to ask questions.")
    else:
        st.caption(f"Using: {model}")

        # Display chat history
        for msg in st.session_state[SessionKey.CHAT_HISTORY]:
            with st.chat_message("user"):
                st.write(msg["user"])
            with st.chat_message("assistant"):
                st.write(msg["assistant"])

        question = st.text_area(
            "Question",
            placeholder="Ask a question about this meeting...",
            height=UI_TEXT_AREA_HEIGHT,
            label_visibility="collapsed",
        )
        if st.button("Ask", type="primary", icon=":material/send:") and question.strip():
            with st.spinner("Thinking..."):
                try:
                    response = ask_about_meeting(
                        transcript, question, st.session_state[SessionKey.CHAT_HISTORY], model, ai_clients
                    )
                except Exception as e:
                    logger.warning("Q&A failed", exc_info=True)
                    st.error(f"Could not answer: {e}")
                else:
                    st.session_state[SessionKey.CHAT_HISTORY].append({"user": question, "assistant": response})
                    st.rerun()

        if st.session_state[SessionKey.CHAT_HISTORY]:
            if st.button("Clear Chat History", type="secondary", icon=":material/delete:"):
                st.session_state[SessionKey.CHAT_HISTORY] = []
                st.rerun()
