"""Artifact polling: fetch, retry policy, controller and per-recording watcher."""

from auralis.polling.controller import TERMINAL_STATES, PollingController, PollState
from auralis.polling.fetcher import ArtifactFetcher
from auralis.polling.policy import PollPolicy
from auralis.polling.watcher import PARSERS, ArtifactWatcher, available_kinds

__all__ = [
    "PARSERS",
    "TERMINAL_STATES",
    "ArtifactFetcher",
    "ArtifactWatcher",
    "PollPolicy",
    "PollState",
    "PollingController",
    "available_kinds",
]
