"""LLM-backed agents and the test executor."""
