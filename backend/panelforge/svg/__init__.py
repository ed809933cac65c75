"""In-memory SVG documents."""
