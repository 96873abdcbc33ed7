"""Team availability tracking: statuses, the status board, and the expiry sweep."""
