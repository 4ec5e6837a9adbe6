"""Web layer — FastAPI app serving the board engine."""
