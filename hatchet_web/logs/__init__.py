"""Log-line highlighting and log table rendering."""
