"""Cross‑cutting helpers: configuration, logging, database, security."""
