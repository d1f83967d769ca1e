"""Domain layer: pure types, rules and algorithms. No I/O."""
