"""Wave API server: health probe, service status and graceful shutdown."""
