"""Resource-specific probers and waiter tables."""
