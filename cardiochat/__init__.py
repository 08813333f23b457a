"""CardioChat: multi-conversation chat sessions backed by Gemini."""

__version__ = "0.1.0"
