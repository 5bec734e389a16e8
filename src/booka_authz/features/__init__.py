"""Feature packages for booka-authz."""
