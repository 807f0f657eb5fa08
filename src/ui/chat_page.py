"""NiceGUI chat interface with NDJSON streaming support."""

import os

from nicegui import ui

from src.models.schemas import Message
from src.ui.session import ChatSession, PanelState
from src.ui.stream_client import run_chat_turn

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #111827; min-height: 100vh; color: white; }

    .brand-gradient { background: linear-gradient(90deg, #f97316 0%, #dc2626 100%); }
    .brand-text {
        background: linear-gradient(90deg, #f97316 0%, #dc2626 100%);
        -webkit-background-clip: text;
        color: transparent;
    }

    .message-assistant { background: linear-gradient(90deg, rgba(249,115,22,.05), rgba(220,38,38,.05)); }
    .message-user { background: transparent; }

    .avatar { width: 2rem; height: 2rem; border-radius: .5rem; flex-shrink: 0; }
    .avatar-compact { width: 1.5rem; height: 1.5rem; font-size: .75rem; }
    .avatar-user { background: #374151; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #f97316;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: rgba(31, 41, 55, .5);
        border: 1px solid rgba(249, 115, 22, .2);
        border-radius: .5rem;
    }
    .input-box:focus-within { border-color: rgba(249, 115, 22, .5); }

    .assistant-panel {
        position: fixed; bottom: 1rem; left: 17rem;
        width: 700px; height: 600px;
        background: #111827;
        border: 1px solid rgba(249, 115, 22, .2);
        border-radius: .5rem;
        box-shadow: 0 20px 25px rgba(0, 0, 0, .4);
        z-index: 50;
    }

    .message-assistant pre { margin: 0.5rem 0; overflow-x: auto; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-assistant table { border-collapse: collapse; }
    .message-assistant td, .message-assistant th { border: 1px solid #374151; padding: 0.25rem 0.5rem; }
</style>
"""

STATUS_TEXT = "Thinking..."


def chat_view(session: ChatSession, compact: bool = False, placeholder: str = "") -> None:
    """Render a message list and input box bound to a chat session.

    Args:
        session: Conversation state owned by the enclosing page.
        compact: Smaller avatars and spacing for the floating panel.
        placeholder: Input placeholder text.
    """
    scroll: ui.scroll_area
    messages_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button
    status_row: ui.row | None = None
    pending_markdown: ui.markdown | None = None

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "brand-gradient"
        size = " avatar-compact" if compact else ""
        with ui.element("div").classes(
            f"avatar{size} {css} flex items-center justify-center text-white"
        ):
            ui.label("Y" if is_user else "AI").classes("text-xs font-medium")

    def render_message(msg: Message) -> ui.markdown:
        is_user = msg.role == "user"
        bubble = "message-user" if is_user else "message-assistant"
        padding = "py-3 px-4" if compact else "p-4"

        with ui.row().classes(f"w-full {bubble} {padding} gap-3 items-start no-wrap"):
            render_avatar(is_user)
            content = ui.markdown(msg.content).classes(
                "flex-1 min-w-0 text-sm leading-relaxed text-gray-100"
            )
        return content

    def scroll_to_bottom() -> None:
        scroll.scroll_to(percent=1.0)

    def refresh_messages() -> None:
        nonlocal status_row, pending_markdown
        status_row = None
        pending_markdown = None
        messages_container.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.label("Ask me anything! I'm here to help.").classes(
                        "text-sm text-gray-400"
                    )
            else:
                for msg in session.messages:
                    render_message(msg)
        scroll_to_bottom()

    def render_status_indicator() -> ui.row:
        """Render the typing indicator shown until the first fragment."""
        with ui.row().classes("w-full message-assistant p-4 gap-3 items-center") as row:
            render_avatar(False)
            with ui.row().classes("gap-1"):
                for _ in range(3):
                    ui.element("div").classes("typing-dot")
            ui.label(STATUS_TEXT).classes("text-sm text-gray-400 italic")
        return row

    def sync_send_button() -> None:
        if session.is_busy or not (input_field.value or "").strip():
            send_btn.disable()
        else:
            send_btn.enable()

    def on_update() -> None:
        """Re-render after each turn state change."""
        nonlocal status_row, pending_markdown

        if not session.is_busy:
            refresh_messages()
            sync_send_button()
            return

        if session.pending is None:
            if status_row is None:
                refresh_messages()
                with messages_container:
                    status_row = render_status_indicator()
                scroll_to_bottom()
            return

        if pending_markdown is None:
            if status_row is not None:
                status_row.delete()
                status_row = None
            with messages_container:
                pending_markdown = render_message(session.pending)
        else:
            pending_markdown.set_content(session.pending.content)
        scroll_to_bottom()

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        if not text or session.is_busy:
            return

        input_field.value = ""
        send_btn.disable()

        await run_chat_turn(session, text, on_update)

    with ui.scroll_area().classes("flex-grow w-full") as scroll:
        messages_container = ui.column().classes("w-full gap-0")
        refresh_messages()

    with ui.row().classes("w-full p-3 gap-2 items-end border-t border-orange-500/20"):
        with ui.element("div").classes("flex-grow input-box px-3 py-1"):
            input_field = (
                ui.textarea(
                    placeholder=placeholder,
                    on_change=lambda _: sync_send_button(),
                )
                .props(
                    "autogrow borderless dense dark rows=1 "
                    f"input-style='max-height: {120 if compact else 200}px'"
                )
                .classes("w-full text-sm")
                .on("keydown.enter.prevent", send_message)
            )
        send_btn = (
            ui.button(icon="send", on_click=send_message)
            .props("flat round color=orange")
        )
        send_btn.disable()


@ui.page("/")
def chat_page() -> None:
    """Full-page chat."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()

    def new_chat() -> None:
        if not session.is_busy:
            session.reset()
            ui.navigate.reload()

    with ui.column().classes("w-full max-w-3xl mx-auto gap-0").style(
        "height: calc(100vh - 32px)"
    ):
        with ui.row().classes("w-full px-4 py-3 items-center justify-between"):
            with ui.row().classes("items-center gap-2"):
                ui.label("Chat").classes("text-2xl font-bold uppercase brand-text")
            ui.button(icon="add", on_click=new_chat).props("flat round color=white")

        chat_view(
            session,
            placeholder="Type something clever (or don't, we won't judge)...",
        )


@ui.page("/assistant")
def assistant_page() -> None:
    """Page hosting the toggleable assistant panel."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()
    panel = PanelState()

    with ui.column().classes("w-64 p-4 gap-2"):
        with (
            ui.button(on_click=panel.toggle)
            .props("unelevated no-caps")
            .classes("w-full brand-gradient text-white rounded-lg")
        ):
            with ui.row().classes("w-full items-center justify-between no-wrap"):
                ui.label("AI Assistant").classes("font-medium")
                ui.icon("chevron_right")

    with ui.column().classes("assistant-panel gap-0").bind_visibility_from(panel, "is_open"):
        with ui.row().classes(
            "w-full p-3 items-center justify-between border-b border-orange-500/20"
        ):
            ui.label("AI Assistant").classes("font-semibold text-white")
            ui.button(icon="close", on_click=panel.toggle).props("flat round dense color=grey")

        chat_view(session, compact=True, placeholder="Type your message...")


def main() -> None:
    """Serve the pages on their own, calling the relay at api_base_url()."""
    ui.run(
        title="Chat",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("UI_PORT", "8080")),
        reload=False,
        dark=True,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "chat-relay-secret"),
    )


if __name__ == "__main__":
    main()
