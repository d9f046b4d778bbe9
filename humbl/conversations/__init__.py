"""Conversation and message persistence endpoints."""
