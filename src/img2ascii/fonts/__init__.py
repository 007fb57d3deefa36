"""Built-in BDF fonts, loaded through importlib.resources."""
