"""Pure class sequencing engine: models, grouping, aggregates, reordering and suggestions."""
