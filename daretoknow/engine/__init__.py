"""Tournament and match orchestration engine."""
