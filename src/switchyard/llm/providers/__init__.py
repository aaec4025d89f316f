"""Backend variants produced by the provider factory."""
