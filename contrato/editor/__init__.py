"""Contract editor: placeholders, inline editing, pricing, validation and sessions."""
