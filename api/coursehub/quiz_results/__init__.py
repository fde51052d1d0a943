"""Quiz results and their teacher-scoped listing."""
