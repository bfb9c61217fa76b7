"""Timer core: state bookkeeping, scheduling and the event channel."""
