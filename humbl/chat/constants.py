"""Prompts, limits and user facing messages for chat endpoints."""

SYSTEM_PROMPT = (
    "You are Humbl AI, a powerful search engine assistant. Help users find relevant information and provide "
    "comprehensive, accurate answers to their queries. Be concise but thorough in your responses."
)
SEARCH_SYSTEM_PROMPT = "You are Humbl AI. Use web search when helpful and include concise citations."
NO_SEARCH_SYSTEM_PROMPT = (
    "You are Humbl AI. Provide your best answer without web search due to a temporary issue."
)
NO_SEARCH_DEFAULT_ANSWER = (
    "I couldn't run web search just now, but here's my best answer based on existing knowledge."
)
TITLE_SYSTEM_PROMPT = (
    "You are a title generator. Generate a short, concise title (3-8 words) for a conversation based on the "
    "user's query and the AI's response. Return ONLY the title, nothing else."
)

SEARCH_DOMAINS = ["*.com", "*.org", "*.net", "*.edu", "*.gov", "*.io", "*.ai", "*.co", "*.news", "*.info", "*.dev"]

FALLBACK_STATUS_CODES = frozenset({400, 403, 429})
MAX_CITATIONS = 10
MAX_HISTORY_MESSAGES = 20
TITLE_FALLBACK_CHARS = 50
TITLE_RESPONSE_EXCERPT_CHARS = 200

SERVICE_UNAVAILABLE_MESSAGE = "Service temporarily unavailable. Please try again later."
WEB_SEARCH_FAILED_MESSAGE = "Web search failed. Please try again."
QUERY_REQUIRED_MESSAGE = "Search query is required"
API_KEY_MISSING_MESSAGE = "Groq API key is not configured"

SUGGEST_URL = "https://suggestqueries.google.com/complete/search"
MAX_SUGGESTIONS = 8
