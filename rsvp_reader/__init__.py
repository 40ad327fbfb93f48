"""RSVP speed-reading engine: tokenizer, ORP, pacing and playback."""

__version__ = "0.1.0"
