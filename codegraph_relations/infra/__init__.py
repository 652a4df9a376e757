"""Infrastructure: configuration and observability."""
