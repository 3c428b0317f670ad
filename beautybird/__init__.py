"""BeautyBird appointment booking service."""
