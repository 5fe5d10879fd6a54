"""Rule-based engines. Work entirely offline."""
