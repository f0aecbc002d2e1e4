"""Overtime module — calculation, eligibility queue and request review."""
