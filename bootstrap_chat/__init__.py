"""Bootstrap Chat - programming assistant specialized in the Bootstrap framework.

Combines NiceGUI for the single-page interface, Agno for the completion call,
httpx for Supabase Auth, FastAPI as the host, and Pydantic for validation.

Components:
    - auth: Session manager over Supabase Auth
    - agent: Completion service against Groq
    - chat: Message log and request/response state machine
    - ui: Login and chat screens
    - api: HTTP host and health endpoint
    - models: Identity, session and message schemas
"""

__version__ = "0.1.0"
