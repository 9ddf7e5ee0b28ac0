# POS cart, pricing and checkout engine

__version__ = "1.0.0"
