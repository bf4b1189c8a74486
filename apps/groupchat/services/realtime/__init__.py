"""In-memory realtime fan-out for group chat."""
