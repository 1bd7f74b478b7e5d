import streamlit as st

from api.config import settings
from ui.client import ask_question

API_URL = settings.API_URL

st.set_page_config(page_title="ChatBot Propuestas Ecuador 2025", layout="centered")

# -------------------------
# Session Initialization
# -------------------------

if "messages" not in st.session_state:
    st.session_state.messages = []

# -------------------------
# Header (empty chat only)
# -------------------------

if not st.session_state.messages:
    st.title("ChatBot Know Proposals Ec - 2025")
    st.caption(
        "This AI learned from the official CNE 2025 documents of the "
        "political parties in the second round."
    )
    st.caption(
        "Ask questions, summarize and learn about the work plans of each political party."
    )

# -------------------------
# Chat History Display
# -------------------------

for msg in st.session_state.messages:
    with st.chat_message(msg["role"]):
        st.markdown(msg["content"])

# -------------------------
# Chat Input
# -------------------------

question = st.chat_input("Enter a message")

if question and question.strip():
    st.session_state.messages.append({"role": "user", "content": question})

    with st.chat_message("user"):
        st.markdown(question)

    with st.chat_message("assistant"):
        with st.spinner("Loading..."):
            answer = ask_question(API_URL, question)
        st.markdown(answer)

    st.session_state.messages.append(
        {"role": "assistant", "content": answer}
    )
