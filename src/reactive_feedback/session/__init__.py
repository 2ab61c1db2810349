"""Per-user reactive sessions: inputs, outputs, observers and their feedback state."""

__all__: list[str] = []
