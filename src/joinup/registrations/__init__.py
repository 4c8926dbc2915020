"""Competition registrations."""
