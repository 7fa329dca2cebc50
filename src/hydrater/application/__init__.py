"""Application use cases composed from domain logic and injected stores."""
