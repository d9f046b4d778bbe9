"""Image, transcription and speech proxy endpoints."""
