"""Pydantic schemas — immutable state snapshots, events, dialogs, collaborator results."""
