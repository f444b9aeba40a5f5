"""Feature packages for retail-authz."""
