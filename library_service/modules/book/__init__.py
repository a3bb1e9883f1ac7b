"""Book catalogue and lending workflow."""
