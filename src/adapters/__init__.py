"""Integration adapters (Twitch HTTP API, JSON config file, event sinks)."""
