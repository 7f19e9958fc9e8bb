"""
Chat Page - AI assistant for finding NYC schools.
"""

import logging

import streamlit as st

from config.settings import get_settings
from src.chat.agent import ChatAgent
from src.data.comparison import ComparisonSelection, SessionStateStorage

logger = logging.getLogger(__name__)

st.set_page_config(
    page_title="Chat - NYC School Finder",
    page_icon="💬",
    layout="wide",
)


def main():
    st.title("💬 School Finder Chat")
    st.markdown(
        "Ask questions about NYC public schools. "
        "I can help you find schools, explain scores, and compare options."
    )

    settings = get_settings()
    if not settings.has_google_key:
        st.error(
            "⚠️ Google API key not configured. "
            "Please set GOOGLE_API_KEY in your environment or .env file."
        )
        return

    if "messages" not in st.session_state:
        st.session_state.messages = []

    if "agent" not in st.session_state:
        st.session_state.agent = ChatAgent()

    with st.expander("💡 Example questions you can ask", expanded=False):
        st.markdown(
            """
            - "What are the best K-5 schools in District 2?"
            - "Tell me about 02M158"
            - "How do Brooklyn schools compare to Queens schools?"
            - "Which schools in Staten Island have the best school climate?"
            """
        )

    for message in st.session_state.messages:
        with st.chat_message(message["role"]):
            st.markdown(message["content"])

    # Let the assistant know which schools the parent is comparing
    selection = ComparisonSelection(SessionStateStorage(st.session_state))
    context = ""
    if selection.dbns:
        context = "The user is currently comparing these schools (DBNs): " + ", ".join(selection.dbns)

    if prompt := st.chat_input("Ask about NYC schools..."):
        st.session_state.messages.append({"role": "user", "content": prompt})

        with st.chat_message("user"):
            st.markdown(prompt)

        with st.chat_message("assistant"):
            message_placeholder = st.empty()
            full_response = ""

            history = [
                {"role": m["role"], "content": m["content"]}
                for m in st.session_state.messages[:-1]
            ]

            try:
                for chunk in st.session_state.agent.chat(prompt, history, context=context):
                    full_response += chunk
                    message_placeholder.markdown(full_response + "▌")

                message_placeholder.markdown(full_response)

            except Exception as e:
                logger.error("Chat request failed: %s", e)
                full_response = f"Sorry, I encountered an error: {str(e)}"
                message_placeholder.markdown(full_response)

        st.session_state.messages.append({"role": "assistant", "content": full_response})

    with st.sidebar:
        st.header("Chat Controls")

        if st.button("Clear Chat History"):
            st.session_state.messages = []
            st.rerun()

        st.divider()
        st.caption("The AI may occasionally make mistakes - verify important details with the school.")


if __name__ == "__main__":
    main()
