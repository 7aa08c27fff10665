"""
Natureza Brindes: catálogo, orçamentos e e-mails transacionais da vitrine.
"""

__version__ = "1.0.0"
