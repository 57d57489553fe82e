"""Request-style invocation surface."""
