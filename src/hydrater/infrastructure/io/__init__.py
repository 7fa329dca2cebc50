"""IO adapters: filesystem, HTTP and inbound payload validation."""
