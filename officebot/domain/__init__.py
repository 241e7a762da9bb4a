"""Domain layer: attendance data model, schedule rules, store and ancillary data."""
