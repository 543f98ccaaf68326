"""
Open the viewer: python -m escapetime
"""
from .app import run

run()
