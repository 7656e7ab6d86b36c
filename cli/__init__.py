"""QueryTorque Joins command-line interface."""
