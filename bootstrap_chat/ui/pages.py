"""NiceGUI login and chat screens."""

import logging
from typing import assert_never

from nicegui import Client, app, background_tasks, ui

from bootstrap_chat.auth import AuthConfig, SessionManager, Subscription, SupabaseAuthClient
from bootstrap_chat.chat import ChatSession
from bootstrap_chat.chat.session import Completer
from bootstrap_chat.errors import AuthError
from bootstrap_chat.models import AuthEvent, AuthSession, ChatMessage, Identity, Sender

logger = logging.getLogger(__name__)

TITLE = "Programming ChatBot"

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }

    .message-user {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
        white-space: pre-wrap;
    }

    .message-assistant {
        background: #f8f9ff;
        border: 1px solid #e5e7eb;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .message-system {
        background: #ffc107;
        color: #212529;
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #667eea;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .message-assistant pre {
        background: #f1f3f5; border-radius: 6px; padding: 0.5rem; overflow-x: auto;
    }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-assistant a { color: #4f46e5; text-decoration: underline; }
</style>
"""


def bubble_style(sender: Sender) -> tuple[str, str]:
    """Return (row alignment, bubble class) for a message sender."""
    match sender:
        case Sender.USER:
            return "justify-end", "message-user"
        case Sender.ASSISTANT:
            return "justify-start", "message-assistant"
        case Sender.SYSTEM:
            return "justify-start", "message-system"
        case _:
            assert_never(sender)


def format_time(message: ChatMessage) -> str:
    return message.created_at.astimezone().strftime("%I:%M %p")


def render_message(message: ChatMessage) -> None:
    align, bubble = bubble_style(message.sender)
    is_user = message.sender is Sender.USER

    with ui.row().classes(f"w-full {align}"):
        with ui.column().classes("max-w-[85%] gap-1"):
            with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                match message.sender:
                    case Sender.ASSISTANT:
                        ui.markdown(
                            message.content,
                            extras=["fenced-code-blocks", "tables"],
                        ).classes("text-sm leading-relaxed")
                    case Sender.USER | Sender.SYSTEM:
                        ui.label(message.content).classes("text-sm leading-relaxed")
                    case _:
                        assert_never(message.sender)
            ui.label(format_time(message)).classes(
                f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
            )


def render_typing_indicator() -> None:
    with ui.row().classes("w-full justify-start"):
        with ui.element("div").classes("message-assistant px-4 py-3"):
            with ui.row().classes("items-center gap-2"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")
                ui.label("Thinking...").classes("text-sm text-gray-500 italic")


def render_login(manager: SessionManager) -> None:
    """Email/password form that toggles between sign-in and sign-up."""
    mode = {"sign_up": False}

    with ui.card().classes("w-full max-w-sm mx-auto mt-24 p-6 shadow"):
        title = ui.label().classes("text-2xl font-semibold w-full text-center")
        subtitle = ui.label().classes("text-gray-500 w-full text-center mb-2")
        error_label = ui.label().classes(
            "w-full text-red-700 bg-red-50 border border-red-200 rounded p-2"
        )
        error_label.set_visibility(False)

        email = ui.input("Email", placeholder="you@email.com").classes("w-full")
        password = ui.input(
            "Password", password=True, password_toggle_button=True
        ).classes("w-full")
        submit_btn = ui.button().classes("w-full mt-2")
        toggle_btn = ui.button().props("flat no-caps").classes("w-full")

    def refresh_labels() -> None:
        if mode["sign_up"]:
            title.set_text("Create Account")
            subtitle.set_text("Create your account to continue")
            submit_btn.set_text("Sign up")
            toggle_btn.set_text("Already have an account? Sign in")
        else:
            title.set_text("Sign In")
            subtitle.set_text("Sign in to access the chat")
            submit_btn.set_text("Sign in")
            toggle_btn.set_text("Don't have an account? Sign up")

    def toggle_mode() -> None:
        mode["sign_up"] = not mode["sign_up"]
        error_label.set_visibility(False)
        refresh_labels()

    async def submit() -> None:
        error_label.set_visibility(False)
        if not email.value or not password.value:
            error_label.set_text("Email and password are required")
            error_label.set_visibility(True)
            return

        submit_btn.disable()
        try:
            if mode["sign_up"]:
                await manager.sign_up(email.value, password.value)
                if manager.get_current_user() is None:
                    ui.notify("Check your email to confirm your account", type="positive")
            else:
                await manager.sign_in(email.value, password.value)
        except AuthError as e:
            error_label.set_text(e.message or "An error occurred")
            error_label.set_visibility(True)
        finally:
            submit_btn.enable()

    submit_btn.on("click", submit)
    toggle_btn.on("click", toggle_mode)
    password.on("keydown.enter", submit)
    refresh_labels()


def render_chat(manager: SessionManager, session: ChatSession, user: Identity) -> None:
    """Chat screen bound to a ChatSession."""
    messages_container: ui.column
    scroll_area: ui.scroll_area
    send_btn: ui.button

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            for message in session.messages:
                render_message(message)
            if session.is_awaiting:
                render_typing_indicator()
        send_btn.set_enabled(not session.is_awaiting)
        scroll_area.scroll_to(percent=1.0)

    async def send_message() -> None:
        await session.submit()

    def new_chat() -> None:
        session.reset()

    async def sign_out() -> None:
        await manager.sign_out()

    with ui.column().classes("w-full max-w-3xl mx-auto app-container").style(
        "height: calc(100vh - 4rem)"
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.column().classes("gap-0"):
                with ui.row().classes("items-center gap-2"):
                    ui.label(TITLE).classes("text-lg font-semibold text-white")
                    ui.badge("Bootstrap Expert", color="white", text_color="black")
                ui.label(f"Hello, {user.email or user.id}").classes("text-xs text-white/80")
            with ui.row().classes("items-center gap-2"):
                ui.button(icon="add", on_click=new_chat).props("flat round color=white")
                ui.button("Sign out", on_click=sign_out).props("outline color=white size=sm")

        # Messages
        with ui.scroll_area().classes("flex-grow w-full bg-gray-50") as scroll_area:
            messages_container = ui.column().classes("w-full p-5 gap-4")

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            (
                ui.textarea(placeholder="Type your question about Bootstrap...")
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .bind_value(session, "draft")
                .on("keydown.enter.prevent", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")

    remove_listener = session.on_change(refresh_messages)
    ui.context.client.on_delete(remove_listener)
    refresh_messages()


def release_on_delete(
    page_client: Client,
    subscription: Subscription,
    auth_client: SupabaseAuthClient,
) -> None:
    """Release the auth listener and HTTP client once the page is gone.

    Runs on client deletion only; a page reconnecting after a dropped
    socket keeps its listener and client.
    """

    def teardown() -> None:
        subscription.unsubscribe()
        background_tasks.create(auth_client.aclose(), name="close-auth-client")

    page_client.on_delete(teardown)


def register_pages(auth_config: AuthConfig, completer: Completer) -> None:
    """Register the single application page.

    Args:
        auth_config: Identity service configuration (validated at startup).
        completer: Completion service shared by all chat sessions.
    """

    @ui.page("/", title=TITLE)
    async def index_page() -> None:
        ui.add_head_html(CUSTOM_CSS)

        client = SupabaseAuthClient(auth_config)
        manager = SessionManager(client, storage=app.storage.user)
        content = ui.element("div").classes("w-full min-h-screen p-4 md:p-8")
        shown_user: dict[str, Identity | None] = {"user": None}

        def show(user: Identity | None) -> None:
            if user is not None and user == shown_user["user"]:
                return
            shown_user["user"] = user
            content.clear()
            with content:
                if user is None:
                    render_login(manager)
                else:
                    render_chat(manager, ChatSession(completer, user=user), user)

        def on_auth_change(event: AuthEvent, auth_session: AuthSession | None) -> None:
            logger.debug(f"Auth event {event.value}")
            show(auth_session.user if auth_session else None)

        subscription = manager.subscribe(on_auth_change)
        release_on_delete(ui.context.client, subscription, client)

        with content:
            ui.spinner(size="lg").classes("mx-auto mt-32")

        await ui.context.client.connected()
        await manager.restore()
