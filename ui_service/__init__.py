"""Rendering and the event loop for the Multi-Counter terminal UI."""
