"""Mixxx Buddy - publishes the current Mixxx DJ session playlist for a local display."""
