"""
Allow running the package directly: python -m mandelview
"""
from .cli import main

main()
