"""Shared helpers: HTTP envelopes, time handling, Socket.IO emitters."""
