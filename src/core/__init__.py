"""Core domain package for taskbar-twitch.

Core contains the shared channel state, the config merge rules, and the two
long-running loops (status poller and config watcher) without any HTTP or
file-specific code, keeping the concurrency logic portable and testable.
"""
