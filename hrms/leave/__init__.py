"""Leave module — leave requests that suppress attendance classification."""
