"""Interfaces of the collaborators the controller depends on."""
