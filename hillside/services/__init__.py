"""Service layer: endpoint wrappers and stateful controllers."""
