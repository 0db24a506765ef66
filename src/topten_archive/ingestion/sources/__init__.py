"""Collaborators that supply top lists and article metadata."""
