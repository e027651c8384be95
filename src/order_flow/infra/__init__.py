"""Infrastructure layer: workflow engine adapters and HTTP transport."""
