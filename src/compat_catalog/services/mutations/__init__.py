"""Mutation engine: validated catalog edits shared by both fact sources."""
