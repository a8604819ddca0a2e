"""Logging setup, the match event feed and NPC phase replays."""
