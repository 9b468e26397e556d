"""AI Universe directory backend: entitlements, catalog and the AI Select assistant."""
