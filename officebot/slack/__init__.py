"""Slack surface: Block Kit builders, user lookups and Bolt listeners."""
