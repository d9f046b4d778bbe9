"""Folder endpoints for organising conversations."""
