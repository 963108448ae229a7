"""Infrastructure-side env/path settings and core settings injection."""
