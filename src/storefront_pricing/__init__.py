"""
Storefront Pricing Package

GST pricing engine and storefront client glue for the retail and
government-quotation storefront.
Converts tax-inclusive cart totals into a CGST/SGST breakdown that every
screen (cart, checkout, order detail, invoice, quote) renders identically.
"""

__version__ = "1.0.0"
