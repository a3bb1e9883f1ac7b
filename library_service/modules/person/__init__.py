"""People who borrow books."""
