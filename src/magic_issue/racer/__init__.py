"""The magic-number issue racer: config, GitHub transport and the race itself."""
