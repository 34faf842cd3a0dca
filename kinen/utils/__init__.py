"""Pure helpers: date ranges, filter state and form validation."""
