"""NiceGUI chat interface rendering a ChatClient's state."""

import logging
import os
from datetime import datetime

import httpx
from nicegui import ui

from pdf_chat.chat.client import ChatClient
from pdf_chat.chat.types import ChatState, ConnectionState

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

CUSTOM_CSS = """
<style>
    body { background: #eef1f6; }
    .chat-shell { background: #fff; border-radius: 10px; box-shadow: 0 1px 6px rgba(15, 23, 42, 0.12); }
    .chat-header { background: #3f51b5; }
    .streaming .q-message-text { opacity: 0.85; }
</style>
"""

STATUS_TEXT = {
    ConnectionState.DISCONNECTED: "",
    ConnectionState.CONNECTING: "Connecting...",
    ConnectionState.CONNECTED: "Generating response...",
    ConnectionState.ERROR: "Connection error",
}


def format_time(timestamp: str) -> str:
    """Render an ISO timestamp as local clock time."""
    try:
        return datetime.fromisoformat(timestamp).astimezone().strftime("%I:%M %p")
    except ValueError:
        return timestamp


async def create_session() -> str:
    """Create a session through the API and return its id."""
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=10.0) as http:
        response = await http.post("/api/sessions", json={})
        response.raise_for_status()
        return response.json()["session"]["id"]


async def submit_input(client: ChatClient, input_field: ui.textarea) -> None:
    """Send the draft in the input box, clearing the box only when the send goes ahead.

    While a reply is still being sent or streamed the draft stays in place.
    """
    if not client.can_send:
        return

    text = input_field.value or ""
    validation = client.validate_message(text)
    if not validation.valid:
        ui.notify(validation.error, type="warning")
        return
    input_field.value = ""
    await client.send_message(text)


@ui.page("/")
async def index_page() -> None:
    """Start a fresh session and open it."""
    session_id = await create_session()
    logger.info(f"Opened new chat session {session_id}")
    ui.navigate.to(f"/chat/{session_id}")


@ui.page("/chat/{session_id}")
async def chat_page(session_id: str) -> None:
    """Chat page for one session."""
    ui.add_head_html(CUSTOM_CSS)

    client = ChatClient(
        session_id,
        base_url=API_BASE_URL,
        on_error=lambda message: ui.notify(message, type="negative"),
    )
    ui.context.client.on_disconnect(client.aclose)

    @ui.refreshable
    def messages_view() -> None:
        state = client.state
        if not state.messages and state.streaming_message is None:
            with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                ui.icon("forum").classes("text-5xl text-gray-300")
                ui.label("Ask something about your PDF").classes("text-lg text-gray-400")
            return

        for message in state.messages:
            is_user = message.role == "user"
            ui.chat_message(
                message.content,
                name="You" if is_user else "Assistant",
                stamp=format_time(message.timestamp) if client.config.show_timestamps else None,
                sent=is_user,
            )

        streaming = state.streaming_message
        if streaming is not None:
            ui.chat_message(
                streaming.content or "...",
                name="Assistant",
                stamp=format_time(streaming.timestamp) if client.config.show_timestamps else None,
            ).classes("streaming")

    def on_state(state: ChatState) -> None:
        messages_view.refresh()
        status_label.set_text(STATUS_TEXT[state.connection_state])
        send_btn.set_enabled(client.can_send)
        stop_btn.set_visibility(state.is_streaming)

    async def send() -> None:
        await submit_input(client, input_field)

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-3xl mx-auto chat-shell").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        with ui.row().classes("w-full chat-header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("picture_as_pdf").classes("text-white text-3xl")
                ui.label("PDF Chat").classes("text-lg font-semibold text-white")
            with ui.row().classes("items-center gap-3"):
                ui.label(session_id[:8].upper()).classes("text-xs text-white/80 font-mono")
                ui.button(icon="add", on_click=lambda: ui.navigate.to("/")).props(
                    "flat round color=white"
                )

        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5 gap-4"),
        ):
            messages_view()

        status_label = ui.label("").classes("px-5 text-sm text-gray-500 italic")

        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            input_field = (
                ui.textarea(placeholder="Type a message...")
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", send)
            )
            send_btn = ui.button(icon="send", on_click=send).props("round unelevated")
            stop_btn = ui.button(icon="stop", on_click=client.stop_streaming).props(
                "round flat color=negative"
            )
            stop_btn.set_visibility(False)

    client.subscribe(on_state)
    await client.fetch_messages()


def main() -> None:
    ui.run(title="PDF Chat", port=8080, reload=False)


if __name__ in {"__main__", "__mp_main__"}:
    main()
