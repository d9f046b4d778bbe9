"""Votes, feedback and reports."""
