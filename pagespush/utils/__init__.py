"""utils/ — Logger y validadores compartidos."""
