"""Request resolution and rendering core."""
