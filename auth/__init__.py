"""auth/ -- Authentication package for LinkDeck.

Layer rule: auth/ imports only core/, stdlib and third-party libraries.
It does NOT import from api/, web/ or catalog/.
api/ imports from auth/, not the other way around.
"""
