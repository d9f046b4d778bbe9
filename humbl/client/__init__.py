"""Streaming chat client: session state, transport and the conversation controller."""

from .controller import SendResult, SendStatus, StreamingConversationController
from .retry import RetryFlavor
from .session import Citation, ConversationMessage, ConversationSession, RetryVersion
from .transport import ChatTransport, HttpChatTransport, TransportError

__all__ = [
    "ChatTransport",
    "Citation",
    "ConversationMessage",
    "ConversationSession",
    "HttpChatTransport",
    "RetryFlavor",
    "RetryVersion",
    "SendResult",
    "SendStatus",
    "StreamingConversationController",
    "TransportError",
]
