from product_composite.cli.main import app, main

__all__ = ["app", "main"]
