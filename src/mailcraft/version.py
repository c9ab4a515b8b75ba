__version__ = "0.1.0"

PRODUCT_BANNER = f"mailcraft v{__version__}"
