"""Pure rest/recovery math."""
