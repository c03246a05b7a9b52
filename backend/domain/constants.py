"""
Domain constants used across services/routers.
"""

# Session tokens
TOKEN_ALGORITHM = "HS256"

# Auth messages (login failures must not reveal whether the email exists)
INVALID_CREDENTIALS = "Invalid email or password"
ACCESS_DENIED = "Access denied"
INVALID_TOKEN = "Invalid token"

# Assistant prompts
RECOMMEND_SYSTEM_PROMPT = (
    "You are GameHub's game recommendation assistant. "
    "Only recommend games from the list provided by the user message. "
    "If none of them fit the user's preferences, say so instead of suggesting other titles."
)
SUPPORT_SYSTEM_PROMPT = (
    "You are GameHub's friendly customer support assistant. "
    "Help users with accounts, purchases, downloads and technical issues. "
    "Keep answers short and practical."
)
NO_GAMES_REPLY = "Sorry, there are no games available in the store right now."
